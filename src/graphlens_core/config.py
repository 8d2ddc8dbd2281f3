"""
Input configuration for GraphLens.

Raw graph dictionaries arrive as JSON from the host application, so the
keys that carry membership attributes are configurable.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class AttributeKeys:
    """Raw node keys used for scoping, focus and search."""
    team: str = "teamId"
    document: str = "documentId"
    user: str = "userId"
    user_display_name: str = "uploadedByName"


DEFAULT_KEYS = AttributeKeys()
