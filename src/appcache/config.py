"""Target configuration: YAML file -> TargetConfig objects."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Any, Union

import yaml

DEFAULT_CONFIG_NAME = "appcache.yaml"

_OPTION_ALIASES = {
    "base_path": "base_path",
    "basePath": "base_path",
    "ignore_manifest": "ignore_manifest",
    "ignoreManifest": "ignore_manifest",
    "prefer_online": "prefer_online",
    "preferOnline": "prefer_online",
}
_CACHE_KEYS = {"patterns", "literals", "pageslinks"}
_TARGET_KEYS = {
    "dest",
    "cache",
    "network",
    "fallback",
    "includes",
    "ignored",
    "base_url",
    "baseUrl",
    "options",
}
_TOP_LEVEL_KEYS = {"options", "targets"}


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class TargetOptions:
    base_path: str
    ignore_manifest: bool = True
    prefer_online: bool = False


@dataclass(frozen=True)
class CacheSources:
    patterns: list[str] = field(default_factory=list)
    literals: list[str] = field(default_factory=list)
    pageslinks: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class TargetConfig:
    name: str
    dest: str
    options: TargetOptions
    cache: CacheSources = field(default_factory=CacheSources)
    network: list[str] = field(default_factory=list)
    fallback: list[str] = field(default_factory=list)
    includes: list[str] = field(default_factory=list)
    ignored: list[str] = field(default_factory=list)
    base_url: str | None = None


def _string_list(value: Any, where: str) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise ConfigError(f"{where} must be a string or a list of strings")
    for i, item in enumerate(value):
        if not isinstance(item, str):
            raise ConfigError(f"{where}[{i}] must be a string")
    return list(value)


def _check_keys(data: dict[str, Any], allowed: set[str], where: str) -> None:
    extra = set(data) - allowed
    if extra:
        unknown = ", ".join(sorted(str(k) for k in extra))
        raise ConfigError(f"{where} has invalid keys: {unknown}")


def _parse_options(raw: Any, where: str) -> dict[str, Any]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{where} must be a mapping")
    _check_keys(raw, set(_OPTION_ALIASES), where)
    options: dict[str, Any] = {}
    for key, value in raw.items():
        name = _OPTION_ALIASES[key]
        if name == "base_path":
            if not isinstance(value, str) or not value:
                raise ConfigError(f"{where}.{key} must be a non-empty string")
        elif not isinstance(value, bool):
            raise ConfigError(f"{where}.{key} must be true or false")
        options[name] = value
    return options


def _parse_cache(raw: Any, where: str) -> CacheSources:
    if isinstance(raw, dict):
        _check_keys(raw, _CACHE_KEYS, where)
        return CacheSources(
            patterns=_string_list(raw.get("patterns"), f"{where}.patterns"),
            literals=_string_list(raw.get("literals"), f"{where}.literals"),
            pageslinks=_string_list(raw.get("pageslinks"), f"{where}.pageslinks"),
        )
    return CacheSources(patterns=_string_list(raw, where))


def _resolve(path: str, root: str) -> str:
    return os.path.normpath(os.path.join(root, path))


def _parse_target(
    name: str, data: Any, defaults: dict[str, Any], root: str
) -> TargetConfig:
    where = f"targets.{name}"
    if not isinstance(data, dict):
        raise ConfigError(f"{where} must be a mapping")
    _check_keys(data, _TARGET_KEYS, where)

    dest = data.get("dest")
    if not isinstance(dest, str) or not dest.strip():
        raise ConfigError(f"{where}.dest must be a non-empty string")

    merged = {"base_path": root, "ignore_manifest": True, "prefer_online": False}
    merged.update(defaults)
    merged.update(_parse_options(data.get("options"), f"{where}.options"))
    merged["base_path"] = _resolve(merged["base_path"], root)

    base_url = data.get("base_url", data.get("baseUrl"))
    if base_url is not None and not isinstance(base_url, str):
        raise ConfigError(f"{where}.base_url must be a string")

    return TargetConfig(
        name=name,
        dest=_resolve(dest.strip(), root),
        options=TargetOptions(**merged),
        cache=_parse_cache(data.get("cache"), f"{where}.cache"),
        network=_string_list(data.get("network"), f"{where}.network"),
        fallback=_string_list(data.get("fallback"), f"{where}.fallback"),
        includes=_string_list(data.get("includes"), f"{where}.includes"),
        ignored=_string_list(data.get("ignored"), f"{where}.ignored"),
        base_url=base_url or None,
    )


def build_targets_config(data: Any, base_dir: str) -> list[TargetConfig]:
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("Config must be a YAML mapping")
    _check_keys(data, _TOP_LEVEL_KEYS, "config")

    defaults = _parse_options(data.get("options"), "options")
    targets = data.get("targets") or {}
    if not isinstance(targets, dict):
        raise ConfigError("'targets' must be a mapping of name -> target")
    return [
        _parse_target(str(name), target, defaults, base_dir)
        for name, target in targets.items()
    ]


def parse_config(
    source: Union[str, Path, IO], base_dir: str | None = None
) -> list[TargetConfig]:
    """
    Parse a target configuration from a path, YAML text or a stream.

    Relative paths in the config resolve against ``base_dir``, which defaults
    to the config file's directory (or the current directory for text input).
    """
    if isinstance(source, Path) or (
        isinstance(source, str) and "\n" not in source and Path(source).is_file()
    ):
        path = Path(source)
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        root = base_dir or str(path.resolve().parent)
    else:
        data = yaml.safe_load(source)
        root = base_dir or os.getcwd()
    return build_targets_config(data, os.path.abspath(root))


def load_config(path: Union[str, Path]) -> list[TargetConfig]:
    return parse_config(Path(path))
