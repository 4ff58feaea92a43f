"""
VSL analyzer: download, transcribe and structurally analyse Video Sales Letters.
"""

__version__ = "0.1.0"
