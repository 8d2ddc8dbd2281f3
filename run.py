#!/usr/bin/env python
"""
Convenience script to run the GraphLens demo during development.

Usage:
    python run.py
"""

import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent / "src"
sys.path.insert(0, str(src_path))

if __name__ == "__main__":
    from graphlens_app.__main__ import main
    sys.exit(main())
