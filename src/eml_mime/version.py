"""
Version constants for eml_mime.
"""

__version__ = "1.0.0"
