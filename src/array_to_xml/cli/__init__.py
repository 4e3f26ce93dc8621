"""Command-line interface for array-to-XML encoding.

Provides the array-to-xml command for converting JSON documents to XML.
"""

from .main import main

__all__ = ["main"]
