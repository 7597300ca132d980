"""
Teacher Admin - administrative backend for teacher records and their photos.
"""

__version__ = "0.1.0"
