"""Tests for the python -m minidoc entry point."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from minidoc.__main__ import main
from minidoc.store import Store


@pytest.fixture
def db_file(tmp_path: Path, monkeypatch) -> Path:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.delenv("MINIDOC_LOG_LEVEL", raising=False)
    path = tmp_path / "db.json"
    monkeypatch.setenv("MINIDOC_PERSISTENCE_FILE", str(path))
    return path


class TestMain:
    def test_no_args_prints_usage(self, db_file: Path, capsys):
        assert main([]) == 1
        assert "Usage" in capsys.readouterr().out

    def test_unknown_command(self, db_file: Path, capsys):
        assert main(["drop", "users"]) == 1
        assert "Usage" in capsys.readouterr().out

    def test_insert_prints_id(self, db_file: Path, capsys):
        assert main(["insert", "users", '{"name": "Ann"}']) == 0
        doc_id = capsys.readouterr().out.strip()
        [doc] = Store(db_file).find("users")
        assert doc["id"] == doc_id

    def test_find_with_query(self, db_file: Path, capsys):
        store = Store(db_file)
        store.insert("users", {"name": "Ann"})
        store.insert("users", {"name": "Bob"})

        assert main(["find", "users", '{"name": "Bob"}']) == 0
        docs = json.loads(capsys.readouterr().out)
        assert [d["name"] for d in docs] == ["Bob"]

    def test_find_all(self, db_file: Path, capsys):
        Store(db_file).insert("users", {"name": "Ann"})
        assert main(["find", "users"]) == 0
        assert len(json.loads(capsys.readouterr().out)) == 1

    def test_collections(self, db_file: Path, capsys):
        store = Store(db_file)
        store.insert("users", {})
        store.insert("posts", {})
        assert main(["collections"]) == 0
        assert capsys.readouterr().out.splitlines() == ["users", "posts"]

    def test_invalid_json_argument(self, db_file: Path):
        assert main(["insert", "users", "{oops"]) == 1
        assert main(["insert", "users", "[1, 2]"]) == 1
        assert not db_file.exists()

    def test_corrupt_store_file(self, db_file: Path):
        db_file.write_text("garbage", encoding="utf-8")
        assert main(["collections"]) == 1

    def test_non_utf8_store_file(self, db_file: Path, caplog):
        db_file.write_bytes(b"\xff\xfe\x00garbage")
        assert main(["collections"]) == 1
        assert "Cannot load store file" in caplog.text
        assert "Invalid JSON argument" not in caplog.text
