"""
blobcheck: debug-harness om multipart blob-uploads van client naar server te verifiëren.
"""

__version__ = "0.1.0"
