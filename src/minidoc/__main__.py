"""Entry point: python -m minidoc <command>

- "collections":                     List collection names
- "insert <collection> <json>":      Insert a document, print its id
- "find <collection> [json-query]":  Print matching documents as JSON
"""

from __future__ import annotations

import json
import logging
import sys

from minidoc.config import load_config
from minidoc.errors import MinidocError
from minidoc.store import Store

logger = logging.getLogger("minidoc")

_USAGE = """Usage: python -m minidoc [collections|insert|find] ...
  collections                     List collection names
  insert <collection> <json>      Insert a document, print its id
  find <collection> [json-query]  Print matching documents"""


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def _parse_object(text: str) -> dict:
    value = json.loads(text)
    if not isinstance(value, dict):
        raise ValueError("expected a JSON object")
    return value


def _run(store: Store, args: list[str]) -> int:
    cmd = args[0]
    if cmd == "collections" and len(args) == 1:
        for name in store.get_collections():
            print(name)
        return 0
    if cmd == "insert" and len(args) == 3:
        print(store.insert(args[1], _parse_object(args[2])))
        return 0
    if cmd == "find" and len(args) in (2, 3):
        query = _parse_object(args[2]) if len(args) == 3 else None
        print(json.dumps(store.find(args[1], query), ensure_ascii=False, indent=2))
        return 0
    print(_USAGE)
    return 1


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if not args:
        print(_USAGE)
        return 1

    config = load_config()
    _setup_logging(config.log_level)

    try:
        store = Store.from_config(config)
        return _run(store, args)
    except (MinidocError, OSError) as e:
        logger.error("%s", e)
        return 1
    except ValueError as e:
        logger.error("Invalid JSON argument: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
