#!/usr/bin/env python3
"""
Simple runner script for the analytics server.
This script ensures the correct Python path is set and runs the app.
"""

import sys
from pathlib import Path

# Add the current directory to Python path
current_dir = Path(__file__).parent
sys.path.insert(0, str(current_dir))

from app.main import main

if __name__ == "__main__":
    main()
