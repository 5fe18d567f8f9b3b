#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Unified CLI dispatcher for Sulfur Cookbook.

  cookbook list -i Milk --sort health
  cookbook serve --port 8000
"""

from __future__ import annotations

import runpy
import sys
from pathlib import Path
from typing import List, Optional

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# alias -> script run as __main__ (everything else goes to the browser commands)
SCRIPTS = {
    "serve": PROJECT_ROOT / "devtools" / "serve_cookbook.py",
}


def main(argv: Optional[List[str]] = None) -> int:
    argv = list(argv) if argv is not None else list(sys.argv[1:])
    alias = argv[0] if argv else ""

    script = SCRIPTS.get(alias)
    if script is not None:
        sys.argv = [str(script)] + argv[1:]
        runpy.run_path(str(script), run_name="__main__")
        return 0

    from apps.cli.commands.cookbook import main as cookbook_main

    return cookbook_main(argv)


if __name__ == "__main__":
    sys.exit(main())
