import logging
import os

import click

from .config import DEFAULT_CONFIG_NAME

COMMANDS_ORDER = ("build", "show")


class OrderedGroup(click.Group):
    def __init__(self, *args, commands_order=None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._commands_order = list(commands_order or [])

    def list_commands(self, ctx: click.Context) -> list[str]:
        if not self._commands_order:
            return super().list_commands(ctx)
        ordered = [name for name in self._commands_order if name in self.commands]
        remaining = [
            name
            for name in super().list_commands(ctx)
            if name not in self._commands_order
        ]
        return ordered + remaining


@click.group(
    cls=OrderedGroup,
    commands_order=COMMANDS_ORDER,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option(
    "-v", "--verbose", is_flag=True, help="Print diagnostic output to stderr."
)
@click.pass_context
def cli(ctx, verbose):
    """Generate and inspect HTML5 AppCache manifests."""
    from .runtime import reset_verbose_logging, set_verbose_logging

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    token = set_verbose_logging(verbose)
    ctx.call_on_close(lambda: reset_verbose_logging(token))
    logging.getLogger("appcache").setLevel(
        logging.DEBUG if verbose else logging.WARNING
    )


@cli.command("build")
@click.argument(
    "config_path",
    required=False,
    default=DEFAULT_CONFIG_NAME,
    type=click.Path(dir_okay=False),
)
@click.option(
    "-t",
    "--target",
    "target_names",
    multiple=True,
    help="Build only the named target(s). Defaults to all targets.",
)
@click.option(
    "-j",
    "--jobs",
    type=int,
    default=None,
    help="Targets to build in parallel (default: $APPCACHE_BUILD_JOBS or 1).",
)
@click.pass_context
def build_cmd(ctx, config_path, target_names, jobs):
    """
    Build the manifests described by a YAML config (default: appcache.yaml).
    Each target's revision is bumped when its manifest already exists.
    """
    import yaml

    from .config import ConfigError, load_config
    from .manifest.build import build_targets
    from .runtime import get_build_jobs

    if not os.path.isfile(config_path):
        raise click.ClickException(f"Config file not found: {config_path}")
    if jobs is not None and jobs < 1:
        raise click.BadParameter("--jobs must be at least 1")

    try:
        targets = load_config(config_path)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Invalid YAML in {config_path}: {exc}") from exc
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    if target_names:
        known = {target.name for target in targets}
        unknown = [name for name in target_names if name not in known]
        if unknown:
            raise click.BadParameter(
                f"unknown target(s): {', '.join(unknown)}", param_hint="--target"
            )
        targets = [target for target in targets if target.name in target_names]

    if not targets:
        click.echo(f"No targets defined in {config_path}.", err=True)
        return

    try:
        outcomes = build_targets(targets, jobs=jobs or get_build_jobs())
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc

    failed = 0
    for outcome in outcomes:
        if outcome.ok:
            click.echo(
                f'AppCache manifest "{os.path.basename(outcome.dest)}" created.'
            )
        else:
            failed += 1
            click.echo(str(outcome.error), err=True)
    if failed:
        click.echo(
            f"AppCache manifest creation failed for {failed} of {len(outcomes)} "
            "target(s).",
            err=True,
        )
        ctx.exit(1)


@cli.command("show")
@click.argument("manifest_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "-f",
    "--format",
    "output_format",
    type=click.Choice(["yaml", "text"]),
    default="yaml",
    show_default=True,
    help="Print the parsed model as YAML or the canonical manifest text.",
)
def show_cmd(manifest_path, output_format):
    """Parse a manifest and print it."""
    import yaml

    from .manifest import FormatError, read_manifest, serialize

    try:
        manifest = read_manifest(manifest_path)
    except FormatError as exc:
        raise click.ClickException(str(exc)) from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise click.ClickException(f"Unable to read {manifest_path}: {exc}") from exc

    if output_format == "text":
        click.echo(serialize(manifest), nl=False)
    else:
        click.echo(
            yaml.safe_dump(manifest.to_dict(), sort_keys=False, allow_unicode=True),
            nl=False,
        )


def main():
    from .logging_utils import configure_logging

    configure_logging()
    cli(obj={})


if __name__ == "__main__":
    main()
