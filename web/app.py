#!/usr/bin/env python3
"""
Matching Engine web entry point.

Usage:
    python web/app.py
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from web.backend.app import main

if __name__ == "__main__":
    main()
