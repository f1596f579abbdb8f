"""Exception types shared by prcopy packages.

Nothing in prcopy_core lets these escape to the host: they are raised at the
edge where a collaborator fails and converted to a degraded result plus a
diagnostic one level up.
"""

from __future__ import annotations


class PrCopyError(Exception):
    """Base class for prcopy errors."""


class ConfigurationLoadError(PrCopyError):
    """Persisted templates could not be read or were malformed."""


class ClipboardError(PrCopyError):
    """The platform clipboard rejected a write."""
