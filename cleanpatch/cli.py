import logging
from pathlib import Path

import typer
import yaml

from cleanpatch.config import ApplyConfig, load_config
from cleanpatch.logging import setup_logging
from cleanpatch.patch.errors import PatchApplyError
from cleanpatch.patch.parsing import PatchParseError, read_patch_file

app = typer.Typer(no_args_is_help = True)


@app.command("apply")
def apply_cmd(
    patch_file: Path = typer.Argument(..., help="Unified diff to apply"),
    strip: int = typer.Option(0, "--strip", "-p", min=0, help="Leading path components to strip"),
    directory: Path = typer.Option(Path("."), "--directory", "-d", help="Directory to patch"),
    config_file: Path | None = typer.Option(None, "--config", help="YAML config file"),
    journal: Path | None = typer.Option(None, "--journal", help="Append apply events to this JSONL file"),
    confine: bool = typer.Option(False, "--confine", help="Refuse paths outside the directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """
    Apply a patch file cleanly, like `patch -pN -d DIR`.
    """
    setup_logging(logging.DEBUG if verbose else logging.WARNING)

    try:
        config = load_config(config_file) if config_file else ApplyConfig.from_env()
    except (OSError, ValueError, yaml.YAMLError) as exc:
        typer.echo(f"Cannot read config {config_file}: {exc}", err=True)
        raise typer.Exit(code=2)
    updates: dict = {}
    if journal is not None:
        updates["journal_path"] = journal
    if confine:
        updates["confine_to_base"] = True
    if updates:
        config = config.model_copy(update=updates)

    try:
        patch_set = read_patch_file(patch_file, encoding=config.encoding)
    except (OSError, UnicodeDecodeError, PatchParseError) as exc:
        typer.echo(f"Cannot read patch {patch_file}: {exc}", err=True)
        raise typer.Exit(code=2)

    try:
        touched = patch_set.apply(directory, strip, config=config)
    except PatchApplyError as exc:
        typer.echo(f"Patch failed ({exc.error_type}): {exc}", err=True)
        raise typer.Exit(code=1)

    for path in dict.fromkeys(touched):
        typer.echo(f"patching file {path}")


@app.command("info")
def info_cmd(
    patch_file: Path = typer.Argument(..., help="Unified diff to describe"),
):
    """
    Show the header lines and the file patches of a patch file.
    """
    try:
        patch_set = read_patch_file(patch_file)
    except (OSError, UnicodeDecodeError, PatchParseError) as exc:
        typer.echo(f"Cannot read patch {patch_file}: {exc}", err=True)
        raise typer.Exit(code=2)

    for line in patch_set.extended_info:
        typer.echo(line)
    for patch in patch_set.patches:
        typer.echo(f"{patch.change_kind} {patch.destination_path} ({len(patch.hunks)} hunks)")


@app.callback()
def main():
    """
    cleanpatch CLI
    """
    pass
