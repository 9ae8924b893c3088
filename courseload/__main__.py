"""
Entry point for running courseload as a module.

Usage:
    python -m courseload check snapshot.json --faculty F001
    python -m courseload rank snapshot.json --top 5
    python -m courseload audit snapshot.json
    python -m courseload generate sample.json --size small
"""

from courseload.cli import main

if __name__ == "__main__":
    main()
