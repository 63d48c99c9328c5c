"""Reading and writing AppCache manifest text."""

from __future__ import annotations

import logging
import re
import sys
from datetime import datetime
from pathlib import Path
from typing import Union

from .types import SIGNATURE, FormatError, Manifest, OrderedSet, Setting, Version

logger = logging.getLogger(__name__)

CACHE = "CACHE"
NETWORK = "NETWORK"
FALLBACK = "FALLBACK"
SETTINGS = "SETTINGS"
SECTIONS = (CACHE, NETWORK, FALLBACK, SETTINGS)

_HEADER_RE = re.compile(r"^([A-Z][A-Z-]*):$")
_VERSION_RE = re.compile(r"^#\s*rev:\s*(\d+)(?:\s+(.*?))?\s*$")


def _log(message: str) -> None:
    from ..runtime import get_verbose_logging

    if get_verbose_logging():
        print(f"[codec] {message}", file=sys.stderr, flush=True)


def _parse_date(raw: str | None) -> datetime | None:
    if not raw:
        return None
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        logger.warning("ignoring unparseable manifest date %r", raw)
        return None


def entry_text(raw: str) -> str | None:
    """The line ``raw`` becomes in a manifest, or None if parse would drop it."""
    line = raw.strip()
    if not line or line.startswith("#") or _HEADER_RE.match(line):
        return None
    return line


def parse(text: str, *, source: str | None = None) -> Manifest:
    """
    Parse manifest text into a Manifest.

    The parser walks the lines once, keeping the name of the active section.
    Entries before any header belong to CACHE; entries under an unknown header
    are skipped until the next known one. Duplicates within a section are
    dropped, the first occurrence kept.
    """
    if text.startswith("\ufeff"):
        text = text[1:]
    lines = text.splitlines()
    if not lines or lines[0].rstrip() != SIGNATURE:
        raise FormatError(f"first line must be {SIGNATURE!r}", source)

    entries: dict[str, OrderedSet[str]] = {name: OrderedSet() for name in SECTIONS}
    version: Version | None = None
    active: str | None = CACHE

    for raw_line in lines[1:]:
        line = raw_line.strip()
        if not line:
            continue
        if line.startswith("#"):
            if version is None:
                match = _VERSION_RE.match(line)
                if match:
                    version = Version(int(match.group(1)), _parse_date(match.group(2)))
            continue
        header = _HEADER_RE.match(line)
        if header:
            name = header.group(1)
            if name in entries:
                active = name
            else:
                _log(f"skipping unknown section {name}:")
                active = None
            continue
        if active is not None:
            entries[active].add(line)

    settings: OrderedSet[Setting] = OrderedSet()
    for token in entries[SETTINGS]:
        setting = Setting.from_token(token)
        if setting is None:
            _log(f"ignoring unknown setting {token!r}")
            continue
        settings.add(setting)

    return Manifest(
        version=version or Version(),
        cache=entries[CACHE].to_list(),
        network=entries[NETWORK].to_list(),
        fallback=entries[FALLBACK].to_list(),
        settings=settings.to_list(),
    )


def _version_line(version: Version) -> str:
    line = f"# rev: {version.revision}"
    if version.date is not None:
        line += f" {version.date.isoformat()}"
    return line


def serialize(manifest: Manifest) -> str:
    lines = [SIGNATURE, _version_line(manifest.version), f"{CACHE}:"]
    lines.extend(manifest.cache)
    if manifest.network:
        lines.append(f"{NETWORK}:")
        lines.extend(manifest.network)
    if manifest.fallback:
        lines.append(f"{FALLBACK}:")
        lines.extend(manifest.fallback)
    if manifest.settings:
        lines.append(f"{SETTINGS}:")
        lines.extend(setting.value for setting in manifest.settings)
    return "\n".join(lines) + "\n"


def read_manifest(path: Union[str, Path]) -> Manifest:
    from ..references.files import read_text

    return parse(read_text(path), source=str(path))


def write_manifest(path: Union[str, Path], manifest: Manifest) -> None:
    from ..references.files import write_text

    write_text(path, serialize(manifest))
