"""
CLI module for eml_mime.

Provides command-line tools for composing and inspecting messages.
"""

from eml_mime.cli.eml import main as eml_main

__all__ = ["eml_main"]
