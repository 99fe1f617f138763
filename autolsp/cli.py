"""CLI entrypoint for autolsp."""

import logging
import sys
from pathlib import Path

import click

from . import __version__


@click.group()
@click.version_option(__version__, prog_name="autolsp")
@click.option("--verbose", is_flag=True, help="Log scheduling and activation decisions")
def cli(verbose: bool) -> None:
    """autolsp - Lazy language server activation.

    Inspect how providers would be activated for a set of filetypes.
    """
    if verbose:
        from rich.logging import RichHandler

        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(show_path=False)],
        )


@cli.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="Provider settings (TOML)",
)
@click.option(
    "--filetype",
    "-f",
    "filetypes",
    multiple=True,
    metavar="FILETYPE",
    help="Open a buffer of this filetype (repeatable)",
)
@click.option("--generics", is_flag=True, help="Also activate filetype-independent providers")
@click.option("--json", "output_json", is_flag=True, help="Output results as JSON")
@click.option("--strict", is_flag=True, help="Exit non-zero if any provider failed")
def doctor(
    config_path: Path,
    filetypes: tuple[str, ...],
    generics: bool,
    output_json: bool,
    strict: bool,
) -> None:
    """Preview which providers would activate.

    Executables are resolved against the current PATH; configuration calls
    are recorded, no server is started.

    Examples:

        autolsp doctor --config servers.toml -f go -f python

        autolsp doctor --config servers.toml --generics --json
    """
    from .commands.doctor import run_doctor

    exit_code = run_doctor(
        config_path,
        filetypes=filetypes,
        generics=generics,
        output_json=output_json,
        strict=strict,
    )
    sys.exit(exit_code)


def main() -> None:
    """Main entrypoint."""
    cli()


if __name__ == "__main__":
    main()
