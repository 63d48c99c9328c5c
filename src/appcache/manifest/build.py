"""One reconciliation cycle per configured target."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from ..concurrency import run_indexed_tasks
from ..config import TargetConfig
from ..references import (
    exists,
    expand,
    extract_references,
    read_text,
    relative,
    write_text,
)
from .aggregate import AggregationSources, combine
from .codec import parse, serialize
from .reconcile import reconcile, settings_for
from .types import FormatError, Manifest

KIND_FORMAT = "format"
KIND_IO = "io"


def _log(message: str) -> None:
    from ..runtime import get_verbose_logging

    if get_verbose_logging():
        print(f"[build] {message}", file=sys.stderr, flush=True)


class TargetError(RuntimeError):
    """A failed cycle: which target, whether the cause was format or I/O."""

    def __init__(self, target: str, kind: str, cause: Exception) -> None:
        self.target = target
        self.kind = kind
        self.cause = cause
        super().__init__(f"target {target} failed ({kind}): {cause}")


@dataclass
class BuildResult:
    name: str
    dest: str
    manifest: Manifest


@dataclass
class TargetOutcome:
    name: str
    dest: str
    result: BuildResult | None = None
    error: TargetError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _read_includes(target: TargetConfig) -> list[Manifest]:
    base = target.options.base_path
    manifests = []
    for path in expand(target.includes, base):
        filename = os.path.join(base, path)
        _log(f"{target.name}: including {filename}")
        manifests.append(parse(read_text(filename), source=filename))
    return manifests


def _read_page_references(target: TargetConfig) -> list[str]:
    base = target.options.base_path
    refs: list[str] = []
    for path in expand(target.cache.pageslinks, base):
        found = extract_references(read_text(os.path.join(base, path)))
        _log(f"{target.name}: {len(found)} references in {path}")
        refs.extend(found)
    return refs


def collect_sources(target: TargetConfig, output: str) -> AggregationSources:
    base = target.options.base_path
    ignored = set(expand(target.ignored, base))
    self_path = None
    if target.options.ignore_manifest:
        self_path = relative(base, output)
        ignored.add(self_path)

    return AggregationSources(
        includes=_read_includes(target),
        page_references=_read_page_references(target),
        literals=list(target.cache.literals),
        pattern_paths=expand(target.cache.patterns, base),
        network=list(target.network),
        fallback=list(target.fallback),
        ignored=ignored,
        base_url=target.base_url,
        self_path=self_path,
    )


def build_target(
    target: TargetConfig, *, clock: Callable[[], datetime] | None = None
) -> BuildResult:
    """
    Run one cycle: read prior, aggregate, assemble, serialize, write.

    A FormatError, or text that is not valid UTF-8, is re-raised as a format
    TargetError; an OSError as an io one. Either way nothing is written. A
    missing destination is not an error; it starts at revision 0.
    """
    output = os.path.normpath(target.dest)
    try:
        prior_text = read_text(output) if exists(output) else None
        lists = combine(collect_sources(target, output))
        manifest = reconcile(
            output,
            prior_text,
            lists,
            settings_for(target.options.prefer_online),
            clock=clock,
        )
        content = serialize(manifest)
        write_text(output, content)
    except (FormatError, UnicodeDecodeError) as exc:
        raise TargetError(target.name, KIND_FORMAT, exc) from exc
    except OSError as exc:
        raise TargetError(target.name, KIND_IO, exc) from exc

    _log(
        f"{target.name}: wrote revision {manifest.version.revision} "
        f"({len(manifest.cache)} cached) to {output}"
    )
    return BuildResult(name=target.name, dest=output, manifest=manifest)


def _check_distinct_destinations(targets: list[TargetConfig]) -> None:
    seen: dict[str, str] = {}
    for target in targets:
        key = os.path.normcase(os.path.abspath(target.dest))
        if key in seen:
            raise ValueError(
                f"targets {seen[key]} and {target.name} both write to {target.dest}"
            )
        seen[key] = target.name


def build_targets(
    targets: list[TargetConfig],
    *,
    jobs: int = 1,
    clock: Callable[[], datetime] | None = None,
) -> list[TargetOutcome]:
    """
    Build every target and return one outcome each, in configuration order.

    A TargetError is reported on its target's outcome. Any other exception is
    a bug; it is re-raised once every target has finished.
    """
    _check_distinct_destinations(targets)

    def make_task(target: TargetConfig) -> Callable[[], BuildResult]:
        return lambda: build_target(target, clock=clock)

    tasks = [(i, make_task(target)) for i, target in enumerate(targets)]
    outcomes = []
    unexpected: Exception | None = None
    for task_result in run_indexed_tasks(tasks, max_workers=jobs):
        target = targets[task_result.index]
        outcome = TargetOutcome(name=target.name, dest=os.path.normpath(target.dest))
        error = task_result.error
        if error is None:
            outcome.result = task_result.value
        elif isinstance(error, TargetError):
            outcome.error = error
        elif unexpected is None:
            unexpected = error
        outcomes.append(outcome)
    if unexpected is not None:
        raise unexpected
    return outcomes
