#!/usr/bin/env python3
# /tex/main.py
"""
tex Main Entry Point
====================

Launches the tex editor from a source checkout:
1) Path Setup: ensures the `tex` package under src/ is importable.
2) Application Run: hands over to `tex.app.start`, which loads the
   environment, configuration and logging, then runs the editor.
"""

import os
import sys

# --- Step 1: Set up the Python Path ---
project_root = os.path.dirname(os.path.abspath(__file__))
src_dir = os.path.join(project_root, "src")
if src_dir not in sys.path:
    sys.path.insert(0, src_dir)

# --- Step 2: Run ---
from tex.app import start  # noqa: E402


if __name__ == "__main__":
    start()
