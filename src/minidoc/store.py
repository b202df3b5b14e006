"""Embedded document store: named collections of JSON documents.

All state lives in memory as ``{collection name: [document, ...]}``. When a
persistence file is configured, the whole mapping is rewritten to it after
every insert and read back once at construction. A write therefore costs
O(total stored data); there is no batching or append log.
"""

from __future__ import annotations

import copy
import json
import logging
import math
import uuid
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, Union

from minidoc.errors import ParseError

if TYPE_CHECKING:
    from minidoc.config import StoreConfig

logger = logging.getLogger(__name__)

JSONValue = Union[None, bool, int, float, str, list["JSONValue"], dict[str, "JSONValue"]]
Document = dict[str, JSONValue]
Query = Mapping[str, Any]

ID_FIELD = "id"
CREATED_AT_FIELD = "createdAt"


def _utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with milliseconds, e.g. 2026-10-19T10:55:00.123Z."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _new_id() -> str:
    return str(uuid.uuid4())


def _check_json_value(value: Any, where: str) -> None:
    """Reject anything that would not survive a JSON round trip unchanged."""
    if value is None or isinstance(value, (bool, int, str)):
        return
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"{where} is {value!r}, which JSON cannot represent")
        return
    if isinstance(value, list):
        for i, item in enumerate(value):
            _check_json_value(item, f"{where}[{i}]")
        return
    if isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError(f"{where} has non-string key {key!r}")
            _check_json_value(item, f"{where}.{key}")
        return
    raise TypeError(f"{where} has unsupported type {type(value).__name__}")


def _strict_equal(left: Any, right: Any) -> bool:
    """Equality without coercion: same kind of value, equal content.

    Numbers compare by value regardless of int/float, but booleans never
    equal numbers. Lists and dicts only match the very same object.
    """
    if isinstance(left, (dict, list)) or isinstance(right, (dict, list)):
        return left is right
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return left == right
    return type(left) is type(right) and left == right


class Store:
    """In-memory document collections, optionally mirrored to one JSON file."""

    def __init__(
        self,
        persistence_file: str | Path | None = None,
        *,
        id_factory: Callable[[], str] = _new_id,
        clock: Callable[[], str] = _utc_timestamp,
    ) -> None:
        self._collections: dict[str, list[Document]] = {}
        self.persistence_file = Path(persistence_file) if persistence_file else None
        self._id_factory = id_factory
        self._clock = clock
        if self.persistence_file is not None:
            self._load()

    @classmethod
    def from_config(cls, config: StoreConfig) -> Store:
        return cls(config.persistence_file)

    # ── Persistence ───────────────────────────────────────────

    def _load(self) -> None:
        """Replace in-memory state with the file contents, if the file exists."""
        path = self.persistence_file
        if path is None or not path.exists():
            return
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except UnicodeDecodeError as e:
            raise ParseError(path, f"not UTF-8 text ({e.reason} at byte {e.start})") from e
        except json.JSONDecodeError as e:
            raise ParseError(path, f"invalid JSON ({e.msg} at line {e.lineno})") from e
        self._collections = self._validate_state(path, data)
        logger.info(
            "Loaded %d collection(s) from %s", len(self._collections), path
        )

    @staticmethod
    def _validate_state(path: Path, data: Any) -> dict[str, list[Document]]:
        if not isinstance(data, dict):
            raise ParseError(path, "top level must be an object of collections")
        for name, docs in data.items():
            if not isinstance(docs, list):
                raise ParseError(path, f"collection {name!r} must be an array")
            if not all(isinstance(doc, dict) for doc in docs):
                raise ParseError(path, f"collection {name!r} must contain only objects")
        return data

    def _persist(self) -> None:
        """Overwrite the backing file with the full state. No-op when in-memory."""
        if self.persistence_file is None:
            return
        self.persistence_file.write_text(
            json.dumps(self._collections, ensure_ascii=False, indent=2, allow_nan=False),
            encoding="utf-8",
        )
        logger.debug("Persisted store to %s", self.persistence_file)

    # ── Public API ────────────────────────────────────────────

    def insert(self, collection_name: str, data: Mapping[str, Any]) -> str:
        """Insert a document into a collection and return its new id.

        The system fields ``id`` and ``createdAt`` always replace any caller
        field of the same name.
        """
        if not isinstance(data, Mapping):
            raise TypeError(f"document data must be a mapping, got {type(data).__name__}")
        _check_json_value(dict(data), "data")

        document_id = self._id_factory()
        document: Document = {ID_FIELD: document_id}
        document.update(copy.deepcopy(dict(data)))
        # System fields win over caller-supplied values
        document[ID_FIELD] = document_id
        document[CREATED_AT_FIELD] = self._clock()

        self._collections.setdefault(collection_name, []).append(document)
        logger.debug("Inserted %s into %r", document_id, collection_name)
        self._persist()
        return document_id

    def find(self, collection_name: str, query: Query | None = None) -> list[Document]:
        """Return documents of a collection matching every key of ``query``.

        An unknown collection yields an empty list. Without a query, every
        document is returned in insertion order. Results are copies.
        """
        collection = self._collections.get(collection_name, [])
        if query is None:
            matched = collection
        else:
            matched = [doc for doc in collection if self._matches(doc, query)]
        return copy.deepcopy(matched)

    def get_collections(self) -> list[str]:
        """Collection names in the order they were first inserted into."""
        return list(self._collections)

    @staticmethod
    def _matches(document: Document, query: Query) -> bool:
        return all(
            key in document and _strict_equal(document[key], value)
            for key, value in query.items()
        )
