#!/usr/bin/env python3
"""
run.py - Main entry point for the tictactoe7 game

Examples:
    python run.py game play             # menu: single or two player
    python run.py game play --mode two
    python run.py game test --position 1,1,1,1,0,...
    python run.py game test_all
    python run.py game benchmark --iterations 500
"""

import os
import sys

# Add the project root to Python path so the package imports without installing
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from tictactoe7.interfaces.cli import run_main

if __name__ == "__main__":
    sys.exit(run_main())
