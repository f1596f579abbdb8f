"""GistStore — share one set of prompt templates across machines via a GitHub Gist.

Data format: a single JSON file named `prcopy_templates.json` inside the
Gist, holding one JSON object of key/value pairs.
"""

from __future__ import annotations

import json
import logging
from typing import Iterable

from github import Github

from prcopy_store.base import BaseStore

logger = logging.getLogger(__name__)

GIST_FILENAME = "prcopy_templates.json"


class GistStore(BaseStore):
    """Stores template overrides as a JSON object in a GitHub Gist.

    Each set() reads the current object, merges the new values in and
    writes the whole file back. The Gist ID is stored in .prcopy.yml under
    `gist_id`; `prcopy init` can create the Gist.
    """

    def __init__(self, gist_id: str, token: str):
        self._gist_id = gist_id
        self._gh = Github(token)

    def _get_gist(self):
        return self._gh.get_gist(self._gist_id)

    def get(self, keys: Iterable[str]) -> dict:
        try:
            values = self._read_values(self._get_gist())
        except Exception as e:
            logger.warning("GistStore.get() failed (%s): %s", type(e).__name__, e)
            return {}
        return {key: values[key] for key in keys if key in values}

    def set(self, values: dict) -> None:
        try:
            gist = self._get_gist()
            merged = {**self._read_values(gist), **values}
            gist.edit(files={GIST_FILENAME: {"content": json.dumps(merged, indent=2)}})
        except Exception as e:
            logger.warning("GistStore.set() failed (%s): %s", type(e).__name__, e)

    def _read_values(self, gist) -> dict:
        """Read the JSON object from the Gist file, or return {}."""
        file_obj = gist.files.get(GIST_FILENAME)
        if file_obj is None:
            return {}
        try:
            data = json.loads(file_obj.content)
        except (json.JSONDecodeError, TypeError):
            return {}
        return data if isinstance(data, dict) else {}
