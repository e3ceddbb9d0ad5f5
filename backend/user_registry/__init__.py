"""
User Registry - user registration records over HTTP/JSON, backed by MongoDB.
"""

__version__ = "1.0.0"
