"""
Entry point for running studytrack as a module.

Usage:
    python -m studytrack dashboard
    python -m studytrack review <id>
    python -m studytrack --help
"""
from .cli.main import main

if __name__ == "__main__":
    main()
