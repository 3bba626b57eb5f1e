"""
Command-Line Interface
=======================

This module contains the command-line interface for catmd. It concatenates a
root Markdown file and the documents it links to into one Markdown document.
"""

from catmd.cli.main import main
