from .aggregate import AggregationSources, combine, matched_entries
from .codec import parse, read_manifest, serialize, write_manifest
from .reconcile import next_revision, reconcile, settings_for
from .types import (
    SIGNATURE,
    FormatError,
    Manifest,
    OrderedSet,
    ResourceLists,
    Setting,
    Version,
)

__all__ = [
    "Manifest",
    "Version",
    "Setting",
    "OrderedSet",
    "ResourceLists",
    "FormatError",
    "SIGNATURE",
    "parse",
    "serialize",
    "read_manifest",
    "write_manifest",
    "AggregationSources",
    "combine",
    "matched_entries",
    "reconcile",
    "next_revision",
    "settings_for",
]
