from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Iterable

from .codec import parse
from .types import Manifest, OrderedSet, ResourceLists, Setting, Version


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def settings_for(prefer_online: bool) -> list[Setting]:
    return [Setting.PREFER_ONLINE] if prefer_online else []


def next_revision(target_path: str, prior_text: str | None) -> int:
    """
    Revision for the manifest about to be written at ``target_path``.

    A missing prior file starts at 0. A prior file that cannot be parsed
    raises FormatError so the caller never overwrites it.
    """
    if prior_text is None:
        return 0
    prior = parse(prior_text, source=target_path)
    return prior.version.revision + 1


def reconcile(
    target_path: str,
    prior_text: str | None,
    lists: ResourceLists,
    settings: Iterable[Setting] = (),
    *,
    clock: Callable[[], datetime] | None = None,
) -> Manifest:
    revision = next_revision(target_path, prior_text)
    now = (clock or _utcnow)()
    return Manifest(
        version=Version(revision=revision, date=now),
        cache=list(lists.cache),
        network=list(lists.network),
        fallback=list(lists.fallback),
        settings=OrderedSet(settings).to_list(),
    )
