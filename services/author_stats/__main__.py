#!/usr/bin/env python3
"""Module entrypoint: ``python -m services.author_stats authors``."""

from services.author_stats.cli import cli


if __name__ == "__main__":
    cli()
