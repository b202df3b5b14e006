"""minidoc: a minimal embedded JSON document store.

Usage:
    store = Store("data.json")
    user_id = store.insert("users", {"name": "Ann", "age": 30})
    store.find("users", {"name": "Ann"})
"""

from minidoc.errors import MinidocError, ParseError
from minidoc.store import Document, Store

__all__ = ["Document", "MinidocError", "ParseError", "Store"]
__version__ = "0.1.0"
