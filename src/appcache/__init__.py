from pathlib import Path


def build(
    config_path: str | Path = "appcache.yaml",
    *,
    targets: list[str] | None = None,
    jobs: int = 1,
) -> list:
    from .config import load_config
    from .manifest.build import build_targets

    configs = load_config(config_path)
    if targets:
        configs = [config for config in configs if config.name in targets]
    return build_targets(configs, jobs=jobs)


def read(path: str | Path):
    from .manifest import read_manifest

    return read_manifest(path)


def render(manifest) -> str:
    from .manifest import serialize

    return serialize(manifest)


__all__ = [
    "build",
    "read",
    "render",
]

__version__ = "0.1.0"
