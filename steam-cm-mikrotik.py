#!/usr/bin/env python3
"""
Steam CM MikroTik Sync - Source Checkout Wrapper

Runs the CLI straight from a source checkout without installing the package:

    MIKROTIK_ADDRESS=192.168.88.1 ./steam-cm-mikrotik.py run
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

from steam_cm_mikrotik.main import main

if __name__ == "__main__":
    main()
