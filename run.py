#!/usr/bin/env python3
"""
Canvas Static Asset Uploader

Run this script to upload files to a canvas as static assets.

Usage:
    python run.py --user alice --password secret --canvas demo assets/
    python run.py --canvas demo --dry-run "assets/ favicon.ico"
    python run.py --dev --canvas demo assets/    # against localhost
    python run.py -j upload.json assets/         # JSON summary of the run
"""

import sys
from canvas_upload.cli import main

if __name__ == "__main__":
    sys.exit(main())
