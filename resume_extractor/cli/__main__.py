"""CLI entry point.

Allows running the CLI as a module: python -m resume_extractor.cli
"""

from resume_extractor.cli import app

if __name__ == "__main__":
    app()
