from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .codec import entry_text
from .types import Manifest, OrderedSet, ResourceLists


@dataclass
class AggregationSources:
    """Raw inputs for one manifest, listed in cache merge order."""

    includes: list[Manifest] = field(default_factory=list)
    page_references: list[str] = field(default_factory=list)
    literals: list[str] = field(default_factory=list)
    pattern_paths: list[str] = field(default_factory=list)
    network: list[str] = field(default_factory=list)
    fallback: list[str] = field(default_factory=list)
    ignored: set[str] = field(default_factory=set)
    base_url: str | None = None
    self_path: str | None = None


def _included_entries(includes: Iterable[Manifest]) -> list[str]:
    entries: list[str] = []
    for manifest in includes:
        entries.extend(manifest.cache)
        entries.extend(manifest.network)
        entries.extend(manifest.fallback)
    return entries


def matched_entries(
    paths: Iterable[str], ignored: set[str], base_url: str | None = None
) -> list[str]:
    from ..references.paths import join_url

    kept = [path for path in paths if path not in ignored]
    if base_url:
        return [join_url(base_url, path) for path in kept]
    return kept


def _entries(values: Iterable[str]) -> OrderedSet[str]:
    kept: OrderedSet[str] = OrderedSet()
    for value in values:
        line = entry_text(value)
        if line is not None:
            kept.add(line)
    return kept


def combine(sources: AggregationSources) -> ResourceLists:
    """
    Merge the sources into deduplicated lists.

    Entries are trimmed, and ones that would not survive a parse of the written
    manifest (blank, ``#`` comments, section headers) are dropped here.
    """
    cache = _entries(
        [
            *_included_entries(sources.includes),
            *sources.page_references,
            *sources.literals,
            *matched_entries(
                sources.pattern_paths, sources.ignored, sources.base_url
            ),
        ]
    )
    if sources.self_path:
        cache.discard(sources.self_path)
    return ResourceLists(
        cache=cache.to_list(),
        network=_entries(sources.network).to_list(),
        fallback=_entries(sources.fallback).to_list(),
    )
