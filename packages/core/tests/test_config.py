"""Tests for configuration and template loading."""

import logging
from unittest.mock import MagicMock

from prcopy_core.config import (
    DEFAULT_TEMPLATES,
    INLINE_TEMPLATE_KEY,
    REVIEW_TEMPLATE_KEY,
    ensure_defaults,
    load_config,
    load_templates,
    reset_templates,
    save_templates,
)
from prcopy_core.diagnostics import Diagnostics
from prcopy_core.services import CoreServices


class _DictStore:
    def __init__(self, values=None):
        self.values = dict(values or {})
        self.writes = []

    def get(self, keys):
        return {k: self.values[k] for k in keys if k in self.values}

    def set(self, values):
        self.writes.append(dict(values))
        self.values.update(values)


def test_defaults_applied_when_no_config_file(tmp_path):
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert config["base_url"] == "https://github.com"
    assert config["store"] == "noop"
    assert config["success_delay"] == 1.5
    assert config["error_delay"] == 2.0


def test_config_file_overrides_defaults(tmp_path):
    cfg = tmp_path / ".prcopy.yml"
    cfg.write_text("store: sqlite\nbase_url: https://ghe.example.com\n")
    config = load_config(config_path=str(cfg))
    assert config["store"] == "sqlite"
    assert config["base_url"] == "https://ghe.example.com"


def test_cli_overrides_config_file(tmp_path):
    cfg = tmp_path / ".prcopy.yml"
    cfg.write_text("store: sqlite\n")
    config = load_config(config_path=str(cfg), cli_overrides={"store": "gist"})
    assert config["store"] == "gist"


def test_none_cli_overrides_ignored(tmp_path):
    cfg = tmp_path / ".prcopy.yml"
    cfg.write_text("store: sqlite\n")
    config = load_config(config_path=str(cfg), cli_overrides={"store": None})
    assert config["store"] == "sqlite"


def test_github_token_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "tok")
    config = load_config(config_path=str(tmp_path / "none.yml"))
    assert config["github_token"] == "tok"


class TestLoadTemplates:
    def test_empty_store_uses_defaults(self):
        assert load_templates(_DictStore()) == DEFAULT_TEMPLATES

    def test_stored_values_override(self):
        store = _DictStore({INLINE_TEMPLATE_KEY: "inline!", REVIEW_TEMPLATE_KEY: "review!"})
        templates = load_templates(store)
        assert templates.inline == "inline!"
        assert templates.review == "review!"

    def test_blank_value_falls_back(self):
        store = _DictStore({INLINE_TEMPLATE_KEY: "", REVIEW_TEMPLATE_KEY: "r"})
        templates = load_templates(store)
        assert templates.inline == DEFAULT_TEMPLATES.inline
        assert templates.review == "r"

    def test_store_failure_falls_back(self, caplog):
        caplog.set_level(logging.WARNING, logger="prcopy")
        store = MagicMock()
        store.get.side_effect = OSError("disk gone")
        assert load_templates(store, Diagnostics()) == DEFAULT_TEMPLATES
        assert any("Storage get failed" in r.getMessage() for r in caplog.records)

    def test_malformed_value_falls_back(self, caplog):
        caplog.set_level(logging.WARNING, logger="prcopy")
        store = _DictStore({INLINE_TEMPLATE_KEY: ["not", "a", "string"], REVIEW_TEMPLATE_KEY: "r"})
        templates = load_templates(store)
        assert templates.inline == DEFAULT_TEMPLATES.inline
        assert templates.review == "r"
        assert any(getattr(r, "context", {}).get("key") == INLINE_TEMPLATE_KEY for r in caplog.records)


class TestSaveTemplates:
    def test_blank_input_saves_default(self):
        store = _DictStore()
        templates = save_templates(store, inline="   ", review="R")
        assert templates.inline == DEFAULT_TEMPLATES.inline
        assert store.values[REVIEW_TEMPLATE_KEY] == "R"

    def test_none_keeps_current(self):
        store = _DictStore({REVIEW_TEMPLATE_KEY: "kept"})
        save_templates(store, inline="I")
        assert store.values[REVIEW_TEMPLATE_KEY] == "kept"
        assert store.values[INLINE_TEMPLATE_KEY] == "I"

    def test_reset_writes_defaults(self):
        store = _DictStore({INLINE_TEMPLATE_KEY: "x", REVIEW_TEMPLATE_KEY: "y"})
        reset_templates(store)
        assert load_templates(store) == DEFAULT_TEMPLATES


class TestEnsureDefaults:
    def test_seeds_missing_keys_only(self):
        store = _DictStore({INLINE_TEMPLATE_KEY: "custom"})
        written = ensure_defaults(store)
        assert written == [REVIEW_TEMPLATE_KEY]
        assert store.values[INLINE_TEMPLATE_KEY] == "custom"
        assert store.values[REVIEW_TEMPLATE_KEY] == DEFAULT_TEMPLATES.review

    def test_no_write_when_complete(self):
        store = _DictStore(DEFAULT_TEMPLATES.as_store_values())
        assert ensure_defaults(store) == []
        assert store.writes == []


class TestCoreServices:
    def test_from_store_loads_templates(self):
        store = _DictStore({REVIEW_TEMPLATE_KEY: "R"})
        services = CoreServices.from_store(store, config={"base_url": "https://x"})
        assert services.templates.review == "R"
        assert services.config["base_url"] == "https://x"
        assert services.config["success_delay"] == 1.5

    def test_reload_picks_up_changes(self):
        store = _DictStore()
        services = CoreServices.from_store(store)
        store.set({INLINE_TEMPLATE_KEY: "new"})
        assert services.reload_templates().inline == "new"

    def test_default_template_placeholders(self):
        assert "{{commentText}}" in DEFAULT_TEMPLATES.inline
        assert DEFAULT_TEMPLATES.review == "{{reviewText}}"
