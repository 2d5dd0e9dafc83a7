#!/usr/bin/env python3
"""
Main entry point for the Typer-based cmdrisk CLI.

This delegates to the UI layer in cmdrisk.ui.cli to keep the
console script mapping stable.
"""

from cmdrisk.ui.cli import run as cmdrisk


if __name__ == "__main__":
    cmdrisk()
