"""fastly-access: Synchronize Fastly authorization state into an access graph."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
