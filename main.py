#!/usr/bin/env python3
"""
Letter-pair lookup
Main entry point for the application

Usage:
    python main.py --help           # Show help
    python main.py lookup AB        # Look up a pair in the corner sheet
    python main.py lookup AB -c edge
    python main.py refresh          # Fetch both sheets and update the cache
    python main.py status           # Show offline cache details
    python main.py shell            # Interactive lookups
    python main.py serve            # Start JSON web interface
"""

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

# Import and run CLI (structured logging is set up from the environment in main)
from cli.main import main

if __name__ == '__main__':
    main()
