"""Tests for prcopy-store implementations."""

from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

from prcopy_store.gist import GIST_FILENAME, GistStore
from prcopy_store.noop import NoOpStore
from prcopy_store.sqlite import SQLiteStore

_KEYS = ["inline_prompt_template", "review_prompt_template"]


# ---------------------------------------------------------------------------
# NoOpStore
# ---------------------------------------------------------------------------


class TestNoOpStore:
    def test_set_does_not_raise(self):
        NoOpStore().set({"inline_prompt_template": "x"})  # must not raise

    def test_get_returns_empty(self):
        store = NoOpStore()
        store.set({"inline_prompt_template": "x"})
        assert store.get(_KEYS) == {}

    def test_close_is_safe(self):
        NoOpStore().close()


# ---------------------------------------------------------------------------
# SQLiteStore
# ---------------------------------------------------------------------------


class TestSQLiteStore:
    def test_set_and_get(self, tmp_path):
        store = SQLiteStore(db_path=str(tmp_path / "test.db"))
        store.set({"inline_prompt_template": "I", "review_prompt_template": "R"})
        assert store.get(_KEYS) == {"inline_prompt_template": "I", "review_prompt_template": "R"}
        store.close()

    def test_absent_keys_omitted(self, tmp_path):
        store = SQLiteStore(db_path=str(tmp_path / "test.db"))
        store.set({"review_prompt_template": "R"})
        assert store.get(_KEYS) == {"review_prompt_template": "R"}
        store.close()

    def test_overwrite(self, tmp_path):
        store = SQLiteStore(db_path=str(tmp_path / "test.db"))
        store.set({"review_prompt_template": "old"})
        store.set({"review_prompt_template": "new"})
        assert store.get(_KEYS) == {"review_prompt_template": "new"}
        store.close()

    def test_empty_keys(self, tmp_path):
        store = SQLiteStore(db_path=str(tmp_path / "test.db"))
        assert store.get([]) == {}
        store.close()

    def test_persists_across_connections(self, tmp_path):
        db = str(tmp_path / "test.db")
        first = SQLiteStore(db_path=db)
        first.set({"inline_prompt_template": "kept"})
        first.close()

        second = SQLiteStore(db_path=db)
        assert second.get(_KEYS) == {"inline_prompt_template": "kept"}
        second.close()

    def test_get_after_close_degrades_to_empty(self, tmp_path):
        store = SQLiteStore(db_path=str(tmp_path / "test.db"))
        store.close()
        assert store.get(_KEYS) == {}


# ---------------------------------------------------------------------------
# GistStore
# ---------------------------------------------------------------------------


def _mock_gist(content: str | None):
    gist = MagicMock()
    if content is None:
        gist.files = {}
    else:
        file_obj = MagicMock()
        file_obj.content = content
        gist.files = {GIST_FILENAME: file_obj}
    return gist


class TestGistStore:
    def _store(self, gist):
        with patch("prcopy_store.gist.Github") as mock_gh_cls:
            mock_gh_cls.return_value.get_gist.return_value = gist
            store = GistStore(gist_id="abc", token="tok")
        return store

    def test_get_reads_json_object(self):
        gist = _mock_gist(json.dumps({"review_prompt_template": "R", "other": 1}))
        assert self._store(gist).get(_KEYS) == {"review_prompt_template": "R"}

    def test_get_missing_file_returns_empty(self):
        assert self._store(_mock_gist(None)).get(_KEYS) == {}

    def test_get_invalid_json_returns_empty(self):
        assert self._store(_mock_gist("not json")).get(_KEYS) == {}

    def test_get_non_object_json_returns_empty(self):
        assert self._store(_mock_gist("[1, 2]")).get(_KEYS) == {}

    def test_set_merges_and_writes(self):
        gist = _mock_gist(json.dumps({"inline_prompt_template": "I"}))
        self._store(gist).set({"review_prompt_template": "R"})

        gist.edit.assert_called_once()
        files = gist.edit.call_args.kwargs["files"]
        written = json.loads(files[GIST_FILENAME]["content"])
        assert written == {"inline_prompt_template": "I", "review_prompt_template": "R"}

    def test_get_api_error_returns_empty(self):
        with patch("prcopy_store.gist.Github") as mock_gh_cls:
            mock_gh_cls.return_value.get_gist.side_effect = Exception("rate limited")
            store = GistStore(gist_id="abc", token="tok")
            assert store.get(_KEYS) == {}

    def test_set_api_error_does_not_raise(self):
        with patch("prcopy_store.gist.Github") as mock_gh_cls:
            mock_gh_cls.return_value.get_gist.side_effect = Exception("forbidden")
            store = GistStore(gist_id="abc", token="tok")
            store.set({"review_prompt_template": "R"})  # must not raise
