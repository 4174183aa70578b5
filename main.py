#!/usr/bin/env python3
"""
Workflow Designer - Main entry point.

This is a thin wrapper around the CLI.

Usage:
    python main.py --help
    python main.py validate ./workflow.json
    python main.py templates apply basic-approval -o ./out
    python main.py simulate ./workflow.json --base-url http://localhost:8000
"""

from workflow_designer.cli.main import main

if __name__ == "__main__":
    main()
