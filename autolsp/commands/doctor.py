"""Doctor command - preview which providers would activate."""

from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console
from rich.table import Table

from ..engine import ActivationEngine
from ..hosts.local import LocalHost
from ..models import CheckState, ProviderStatus
from ..settings import load_settings

_STATE_STYLE = {
    CheckState.SUCCEEDED: "green",
    CheckState.FAILED: "red",
    CheckState.UNCHECKED: "dim",
}


def run_doctor(
    config_path: Path,
    *,
    filetypes: tuple[str, ...] = (),
    generics: bool = False,
    output_json: bool = False,
    strict: bool = False,
    path: str | None = None,
) -> int:
    """
    Run the activation engine against an in-memory host and report the outcome.

    One buffer is opened per requested filetype; configure calls are recorded,
    not executed. With ``strict``, any failed provider gives exit code 1.
    """
    err = Console(stderr=True)

    try:
        settings = load_settings(config_path)
    except (OSError, ValueError) as e:
        err.print(f"Could not load {config_path}: {e}", style="bold red")
        return 2

    host = LocalHost(path=path)
    engine = ActivationEngine(host, **settings.engine_kwargs())

    for ft in filetypes:
        host.open_buffer(ft)
    for ft in filetypes:
        engine.check_filetype(ft)
    if generics:
        engine.check_generics()
    host.run_pending()

    statuses = engine.status()

    if output_json:
        data = {
            "providers": [s.to_dict() for s in statuses],
            "configured": sorted(host.configs),
            "messages": [message for message, _level in host.messages],
        }
        print(json.dumps(data, indent=2, sort_keys=True))
    else:
        _print_table(Console(), statuses)
        for message, _level in host.messages:
            err.print(message, style="red")

    failed = [s for s in statuses if s.state is CheckState.FAILED]
    if strict and failed:
        err.print(f"{len(failed)} provider(s) failed to activate", style="bold red")
        return 1
    return 0


def _print_table(console: Console, statuses: list[ProviderStatus]) -> None:
    table = Table(title="Providers")
    table.add_column("provider", style="cyan", no_wrap=True)
    table.add_column("filetypes", style="magenta")
    table.add_column("executable", style="dim")
    table.add_column("state")
    table.add_column("enabled")

    for s in statuses:
        table.add_row(
            s.name,
            ", ".join(s.tags),
            s.executable or "",
            f"[{_STATE_STYLE[s.state]}]{s.state.value}[/]",
            "yes" if s.enabled else "",
        )

    console.print(table)
