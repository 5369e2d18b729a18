"""CLI commands for patching, inspecting and rendering revision trees."""

import json
from pathlib import Path
from typing import Optional

import typer

from treepatch.config import settings
from treepatch.errors import PatchApplicationError, PatchScriptError
from treepatch.models.error import ErrorRecord
from treepatch.printer import render, render_paths
from treepatch.services.patch_application import PatchApplicationDriver
from treepatch.services.patch_script import load_patch_script
from treepatch.services.revision_loader import RevisionLoader
from treepatch.utils.logging import setup_logging
from treepatch.utils.metrics import PatchMetrics

APP_HELP = "Apply structural patches to program syntax trees."

app = typer.Typer(help=APP_HELP, no_args_is_help=True)


def _configure_logging(log_level: Optional[str]) -> None:
    setup_logging(log_level or settings.log_level, json_output=settings.log_json)


def _load(loader: RevisionLoader, path: Path):
    try:
        return loader.load(path)
    except (ValueError, FileNotFoundError) as error:
        typer.echo(f"Failed to load {path}: {error}", err=True)
        raise typer.Exit(code=2) from error


@app.command("apply")
def apply_command(
    prev: Path = typer.Argument(..., help="Previous revision of the source file."),
    new: Path = typer.Argument(..., help="New revision of the source file."),
    script: Path = typer.Argument(..., help="YAML patch script for the revision pair."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the patched tree render here."),
    check: Optional[bool] = typer.Option(
        None, "--check/--no-check", help="Fail unless the patched tree renders like the new revision."
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override the configured log level."),
) -> None:
    """Patch the previous revision's tree and print its render."""
    _configure_logging(log_level)
    revision_pair = f"{prev} -> {new}"
    loader = RevisionLoader()

    prev_root = _load(loader, prev)
    new_root = _load(loader, new)
    try:
        patch_set = load_patch_script(script).resolve(prev_root, new_root)
    except (PatchScriptError, FileNotFoundError) as error:
        typer.echo(f"Invalid patch script {script}: {error}", err=True)
        raise typer.Exit(code=2) from error
    if patch_set.is_empty:
        typer.echo(f"Patch script {script} contains no patches", err=True)

    metrics = PatchMetrics(revision_pair=revision_pair)
    try:
        PatchApplicationDriver().apply_patch_set(patch_set, revision_pair=revision_pair, metrics=metrics)
    except (PatchApplicationError, ValueError) as error:
        record = ErrorRecord.from_exception(
            error, phase=metrics.failed_phase or "unknown", revision_pair=revision_pair
        )
        typer.echo(record.summary(), err=True)
        raise typer.Exit(code=1) from error

    patched = render(prev_root)
    if output is not None:
        output.write_text(patched + "\n", encoding="utf-8")
        typer.echo(f"Wrote patched tree to {output}")
    else:
        typer.echo(patched)
    typer.echo(json.dumps(metrics.get_metrics_summary(), indent=2), err=True)

    should_check = settings.check_result if check is None else check
    if should_check:
        expected = render(new_root)
        if patched != expected:
            typer.echo(f"Patched tree differs from the new revision {new}", err=True)
            raise typer.Exit(code=1)
        typer.echo("Patched tree matches the new revision.")


@app.command("paths")
def paths_command(
    source: Path = typer.Argument(..., help="Source file to list node paths for."),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override the configured log level."),
) -> None:
    """Print the path, tag and value of every node of a source file."""
    _configure_logging(log_level)
    typer.echo(render_paths(_load(RevisionLoader(), source)))


@app.command("render")
def render_command(
    source: Path = typer.Argument(..., help="Source file to render."),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override the configured log level."),
) -> None:
    """Print the canonical render of a source file."""
    _configure_logging(log_level)
    typer.echo(render(_load(RevisionLoader(), source)))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
