"""
Demo data - a multi-team RAG knowledge base.

Four teams upload documents that are split into chunk nodes. Chunks of a
document form a sequence, first chunks of consecutive documents form a
curriculum path, and a few random links connect early documents across
teams. Generation is deterministic for a given seed.
"""

from typing import Any, Dict, List, Optional

TEAM_NAMES = {
    "team-alpha": "Instructional Design",
    "team-bravo": "Enablement Ops",
    "team-charlie": "Compliance Learning",
    "team-delta": "Product Academy",
}

TEAM_USERS = {
    "team-alpha": [("user-a1", "Avery Chen"), ("user-a2", "Priya Singh"), ("user-a3", "Elena Torres")],
    "team-bravo": [("user-b1", "Noah Patel"), ("user-b2", "Maya Rivera"), ("user-b3", "Jordan Park")],
    "team-charlie": [("user-c1", "Liam Brooks"), ("user-c2", "Nina Morales"), ("user-c3", "Omar Khan")],
    "team-delta": [("user-d1", "Harper Lee"), ("user-d2", "Sofia Kim"), ("user-d3", "Mateo Alvarez")],
}

TEAM_COLORS = {
    "team-alpha": "#ff8a3d",
    "team-bravo": "#58b6ff",
    "team-charlie": "#59d19a",
    "team-delta": "#c4a2ff",
}

CROSS_LINK_ATTEMPTS = 120


class _Lcg:
    """Linear congruential generator; stable across platforms."""

    def __init__(self, seed: int):
        self._x = seed

    def __call__(self) -> float:
        self._x = (self._x * 1664525 + 1013904223) % 4294967296
        return self._x / 4294967296


def doc_id(team_id: str, idx: int) -> str:
    return f"{team_id}-doc-{idx:03d}"


def chunk_id(team_id: str, doc_idx: int, chunk_idx: int) -> str:
    return f"{team_id}-d{doc_idx:03d}-c{chunk_idx:03d}"


def _source_type(doc_idx: int) -> str:
    return ("PDF", "Confluence", "Notion")[doc_idx % 3]


def _chunk_type(chunk_idx: int) -> str:
    if chunk_idx % 3 == 0:
        return "Assessment"
    return "Activity" if chunk_idx % 2 == 0 else "Concept"


def create_saas_demo_data(seed: int = 42) -> Dict[str, Any]:
    """
    Build the demo knowledge base.

    Returns:
        Dict with 'nodes', 'links', 'groups', 'teams', 'documents', 'users',
        'user_profiles' and 'team_colors'
    """
    rand = _Lcg(seed)
    nodes: List[Dict[str, Any]] = []
    links: List[Dict[str, Any]] = []
    groups: List[Dict[str, Any]] = []
    documents: List[Dict[str, Any]] = []
    users: List[Dict[str, Any]] = []
    user_profiles: Dict[str, Dict[str, str]] = {}

    for team_id, members in TEAM_USERS.items():
        for user_id, name in members:
            users.append({"id": user_id, "name": name, "teamId": team_id})
            user_profiles[user_id] = {"name": name, "teamId": team_id}

    for t_idx, (team_id, team_name) in enumerate(TEAM_NAMES.items()):
        members = TEAM_USERS[team_id]
        team_node_ids: List[str] = []

        for d in range(1, 10 + t_idx * 2 + 1):
            document_id = doc_id(team_id, d)
            documents.append({
                "id": document_id,
                "teamId": team_id,
                "title": f"{team_name} Source {d}",
            })

            doc_node_ids: List[str] = []
            for c in range(1, 8 + d % 5 + 1):
                node_id = chunk_id(team_id, d, c)
                uploader_id, uploader_name = members[int(rand() * len(members))]
                nodes.append({
                    "id": node_id,
                    "label": f"{team_name}: Chunk {d}.{c}",
                    "category": "Course Design" if c % 2 == 0 else "Knowledge Chunk",
                    "teamId": team_id,
                    "documentId": document_id,
                    "userId": uploader_id,
                    "uploadedByName": uploader_name,
                    "sourceType": _source_type(d),
                    "confidence": round(0.62 + rand() * 0.37, 2),
                    "chunkType": _chunk_type(c),
                    "tags": [
                        "assessment" if c % 3 == 0 else "content",
                        "module" if d % 2 == 0 else "activity",
                        "rag-indexed" if t_idx % 2 == 0 else "ai-curated",
                    ],
                    "summary": f"Ingested chunk {c} from {document_id} for {team_name}.",
                    "excerpt": (
                        "This chunk covers "
                        f"{'instruction sequencing' if c % 2 == 0 else 'learning objective alignment'}"
                        f" and reusable guidance for {team_name}."
                    ),
                    "val": 5 + int(rand() * 7),
                })
                team_node_ids.append(node_id)
                doc_node_ids.append(node_id)

                if c > 1:
                    links.append({
                        "source": chunk_id(team_id, d, c - 1),
                        "target": node_id,
                        "relation": "doc-sequence",
                        "strength": 1 + int(rand() * 2),
                    })

            groups.append({
                "id": document_id,
                "label": f"{team_name} · Doc {d}",
                "nodeIds": doc_node_ids,
            })

            if d > 1:
                links.append({
                    "source": chunk_id(team_id, d - 1, 1),
                    "target": chunk_id(team_id, d, 1),
                    "relation": "curriculum-path",
                    "strength": 2,
                })

        groups.append({
            "id": team_id,
            "label": f"{team_name} Team",
            "nodeIds": team_node_ids,
        })

    early = [n for n in nodes if n["documentId"].endswith(("001", "002"))]
    for _ in range(CROSS_LINK_ATTEMPTS):
        a = early[int(rand() * len(early))]
        b = early[int(rand() * len(early))]
        if a["id"] == b["id"]:
            continue
        same_team = a["teamId"] == b["teamId"]
        links.append({
            "source": a["id"],
            "target": b["id"],
            "relation": "semantic-near" if same_team else "cross-team-near",
            "strength": 1 if same_team else 2,
        })

    return {
        "nodes": nodes,
        "links": links,
        "groups": groups,
        "teams": [{"id": team_id, "name": name} for team_id, name in TEAM_NAMES.items()],
        "documents": documents,
        "users": users,
        "user_profiles": user_profiles,
        "team_colors": dict(TEAM_COLORS),
    }


def create_ingestion_patch(
    team_id: str,
    document_id: str,
    start_index: int = 900,
    uploader_user_id: Optional[str] = None,
) -> Dict[str, List[Dict[str, Any]]]:
    """Four freshly ingested chunks for `document_id`, linked in sequence."""
    members = TEAM_USERS.get(team_id, [])
    fallback_user = members[0][0] if members else f"user-{team_id}"
    uploader = uploader_user_id or fallback_user
    uploader_name = next((name for uid, name in members if uid == uploader), "Unknown User")

    nodes: List[Dict[str, Any]] = []
    links: List[Dict[str, Any]] = []
    for i in range(4):
        node_id = f"{team_id}-ingest-{document_id}-{start_index + i}"
        nodes.append({
            "id": node_id,
            "label": f"Ingested {document_id} chunk {i + 1}",
            "category": "New Ingestion",
            "teamId": team_id,
            "documentId": document_id,
            "userId": uploader,
            "uploadedByName": uploader_name,
            "sourceType": "Upload",
            "confidence": 0.88,
            "chunkType": "Concept" if i % 2 == 0 else "Activity",
            "tags": ["ingestion", "new", "rag-indexed"],
            "summary": f"Freshly ingested chunk {i + 1} for {document_id}.",
            "excerpt": f"Newly embedded content snippet {i + 1} from {document_id}.",
            "val": 6,
        })
        if i > 0:
            links.append({
                "source": f"{team_id}-ingest-{document_id}-{start_index + i - 1}",
                "target": node_id,
                "relation": "ingestion-sequence",
                "strength": 2,
            })

    return {"nodes": nodes, "links": links}
