# run_export.py
"""
Entry point for exporting a Fitbit activity as TCX.
Run with: python3 run_export.py YYYY-MM-DD
"""

import sys

from fitbit_tcx.app import main

if __name__ == "__main__":
    sys.exit(main())
