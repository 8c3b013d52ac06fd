"""Resource syncers and the components behind them.

Public API::

    from fastly_access.sync import ResourceSyncer, iterate_pages
    from fastly_access.sync.directory import PrincipalDirectory
    from fastly_access.sync.catalog import ResourceCatalog
    from fastly_access.sync.synthesizer import GrantSynthesizer
    from fastly_access.sync.mutator import GrantMutator
"""

from __future__ import annotations

from fastly_access.sync.base import ResourceSyncer, iterate_pages

__all__ = [
    "ResourceSyncer",
    "iterate_pages",
]
