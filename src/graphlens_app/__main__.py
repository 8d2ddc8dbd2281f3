"""
Main entry point for the GraphLens demo.

Usage:
    python -m graphlens_app
    graphlens  (if installed)

Runs headless: loads the demo knowledge base, lets the layout settle,
scopes to the first team, flies the camera to one of its documents and
logs the resulting snapshot.
"""

import logging
import sys
import traceback
from pathlib import Path
from datetime import datetime

logger = logging.getLogger("graphlens_app")

WARMUP_TICKS = 60
SAFETY_TIMEOUT_MS = 10000


def setup_exception_hook():
    """Setup global exception hook to catch Qt exceptions."""
    log_file = Path.cwd() / "crash_log.txt"

    def exception_hook(exctype, value, tb):
        # Write to log file
        error_msg = ''.join(traceback.format_exception(exctype, value, tb))
        with open(log_file, "a", encoding="utf-8") as f:
            f.write(f"\n{'='*60}\n")
            f.write(f"UNHANDLED EXCEPTION at {datetime.now()}\n")
            f.write(f"{'='*60}\n")
            f.write(error_msg)
            f.write("\n")

        logger.critical("Unhandled exception; log saved to %s\n%s", log_file, error_msg)

        # Call default handler
        sys.__excepthook__(exctype, value, tb)

    sys.excepthook = exception_hook


def main():
    """Launch the GraphLens demo."""
    setup_exception_hook()
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Ensure src is in path for development
    src_path = Path(__file__).parent.parent
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))

    from PyQt6.QtCore import QCoreApplication, QTimer

    from graphlens_core.adapters.force_layout import ForceLayout3D
    from graphlens_core.demo import create_saas_demo_data
    from graphlens_app.viewmodels import FocusVM, FrameDriver

    app = QCoreApplication(sys.argv)
    app.setApplicationName("GraphLens")

    demo = create_saas_demo_data(104)
    team_id = demo["teams"][0]["id"]
    document_id = next(doc["id"] for doc in demo["documents"] if doc["teamId"] == team_id)

    layout = ForceLayout3D()
    focus_vm = FocusVM(
        data={"nodes": demo["nodes"], "links": demo["links"]},
        groups=demo["groups"],
        layout=layout,
        team_colors=demo["team_colors"],
        user_profiles=demo["user_profiles"],
        team_scope=[team_id],
    )
    focus_vm.focus_changed.connect(
        lambda payload: logger.info("focus-changed %s (%d nodes)",
                                    payload["type"], len(payload["nodeIds"]))
    )

    for _ in range(WARMUP_TICKS):
        layout.tick()

    driver = FrameDriver(focus_vm)

    def finish():
        if not driver.is_running:
            return
        driver.stop()
        snapshot = focus_vm.get_snapshot()
        view = snapshot.view.to_dict() if snapshot.view else None
        logger.info("Snapshot: quality=%s team_scope=%s focus=%d nodes view=%s",
                    snapshot.quality, snapshot.team_scope,
                    len(snapshot.focus_node_ids), view)
        app.quit()

    driver.flight_finished.connect(finish)
    QTimer.singleShot(SAFETY_TIMEOUT_MS, finish)

    if not focus_vm.focus_document(document_id):
        logger.warning("Nothing to focus for %s", document_id)
        return 1

    driver.start()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
