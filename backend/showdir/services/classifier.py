"""Stat, classify and sort the entries of one directory."""

from __future__ import annotations

import asyncio
import os
from collections.abc import Iterable, Sequence

import structlog

from showdir.schemas.listing import Entry, FileMetadata, ListingBuckets

logger = structlog.get_logger(__name__)


def sort_entries(entries: Iterable[Entry]) -> list[Entry]:
    """Stable locale-style ordering by name.

    Letters compare case-insensitively first; on a tie the lowercase spelling
    comes first, so ``b`` sorts before ``B`` and both before ``Zeta``.
    """
    return sorted(entries, key=lambda entry: (entry.name.casefold(), entry.name.swapcase()))


async def _stat_entry(directory: str, name: str) -> Entry:
    try:
        st = await asyncio.to_thread(os.stat, os.path.join(directory, name))
    except OSError as exc:
        logger.debug("entry_stat_failed", directory=directory, name=name, error=str(exc))
        return Entry(name=name, stat_error=str(exc))
    return Entry(name=name, stat=FileMetadata.from_stat(st))


async def classify_entries(directory: str, names: Sequence[str]) -> ListingBuckets:
    """Stat every name concurrently and partition the results into sorted buckets.

    A failed stat never aborts the listing: the entry lands in ``unknowns`` with
    no metadata. The returned buckets are built only after every stat settled.
    """
    if not names:
        return ListingBuckets()

    entries = await asyncio.gather(*(_stat_entry(directory, name) for name in names))

    buckets = ListingBuckets()
    for entry in entries:
        if entry.stat is None:
            buckets.unknowns.append(entry)
        elif entry.stat.is_dir:
            buckets.dirs.append(entry)
        else:
            buckets.files.append(entry)

    buckets.unknowns = sort_entries(buckets.unknowns)
    buckets.dirs = sort_entries(buckets.dirs)
    buckets.files = sort_entries(buckets.files)
    return buckets
