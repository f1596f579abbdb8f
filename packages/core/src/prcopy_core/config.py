import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from prcopy_core.diagnostics import Diagnostics
from prcopy_core.errors import ConfigurationLoadError

DEFAULT_CONFIG: dict = {
    "base_url": "https://github.com",
    "store": "noop",  # noop | sqlite | gist
    "store_path": ".prcopy.db",
    "gist_id": None,
    "timeout": 20.0,  # seconds, applied by the HTTP fetcher only
    "success_delay": 1.5,
    "error_delay": 2.0,
}

INLINE_TEMPLATE_KEY = "inline_prompt_template"
REVIEW_TEMPLATE_KEY = "review_prompt_template"
TEMPLATE_KEYS = (INLINE_TEMPLATE_KEY, REVIEW_TEMPLATE_KEY)

_DEFAULT_INLINE = """An AI wrote this GitHub PR review. Read the review and if you think it's correct fix it using good practices

File: {{filePath}}
Lines: {{lineStart}}–{{lineEnd}}

Review comment:
{{commentText}}

Relevant code:
```
{{codeText}}
```
"""

_DEFAULT_REVIEW = "{{reviewText}}"


@dataclass(frozen=True)
class TemplateSet:
    inline: str
    review: str

    def as_store_values(self) -> dict:
        return {INLINE_TEMPLATE_KEY: self.inline, REVIEW_TEMPLATE_KEY: self.review}


DEFAULT_TEMPLATES = TemplateSet(inline=_DEFAULT_INLINE, review=_DEFAULT_REVIEW)


def load_config(config_path: str = ".prcopy.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .prcopy.yml in the current directory
      3. CLI argument overrides
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    # Only the Gist store needs a token.
    config["github_token"] = os.environ.get("GITHUB_TOKEN")

    return config


def _read_template(values: dict, key: str) -> Optional[str]:
    value = values.get(key)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ConfigurationLoadError(f"{key} must be a string, got {type(value).__name__}")
    return value


def load_templates(store, diagnostics: Optional[Diagnostics] = None) -> TemplateSet:
    """
    Read template overrides from *store*, falling back to DEFAULT_TEMPLATES.

    Missing or blank keys use the default silently; an unreadable store or a
    malformed value falls back to the default with a warning.
    """
    diagnostics = diagnostics or Diagnostics()
    try:
        values = store.get(list(TEMPLATE_KEYS)) or {}
    except Exception as e:
        diagnostics.warn("Storage get failed; using default templates", error=str(e))
        return DEFAULT_TEMPLATES

    resolved = {}
    for key, default in zip(TEMPLATE_KEYS, (DEFAULT_TEMPLATES.inline, DEFAULT_TEMPLATES.review)):
        try:
            resolved[key] = _read_template(values, key) or default
        except ConfigurationLoadError as e:
            diagnostics.warn("Invalid stored template; using default", key=key, error=str(e))
            resolved[key] = default
    return TemplateSet(inline=resolved[INLINE_TEMPLATE_KEY], review=resolved[REVIEW_TEMPLATE_KEY])


def save_templates(store, inline: Optional[str] = None, review: Optional[str] = None) -> TemplateSet:
    """
    Persist edited templates. Blank input is replaced by the built-in default,
    a None argument keeps the currently stored value.
    """
    current = load_templates(store)
    templates = TemplateSet(
        inline=current.inline if inline is None else (inline.strip() or DEFAULT_TEMPLATES.inline),
        review=current.review if review is None else (review.strip() or DEFAULT_TEMPLATES.review),
    )
    store.set(templates.as_store_values())
    return templates


def reset_templates(store) -> TemplateSet:
    store.set(DEFAULT_TEMPLATES.as_store_values())
    return DEFAULT_TEMPLATES


def ensure_defaults(store, diagnostics: Optional[Diagnostics] = None) -> list[str]:
    """Seed default templates for keys the store does not have yet. Returns the keys written."""
    diagnostics = diagnostics or Diagnostics()
    existing = store.get(list(TEMPLATE_KEYS)) or {}
    updates = {
        key: value for key, value in DEFAULT_TEMPLATES.as_store_values().items() if not existing.get(key)
    }
    if updates:
        store.set(updates)
        diagnostics.log("Default prompt templates set", keys=sorted(updates))
    return sorted(updates)
