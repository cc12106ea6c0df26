#!/usr/bin/env python3
"""
Command-line interface for building ATS resumes from LLM resume JSON.

Subcommands:
- build: Write <name>_ats_optimized.tex and .txt (with roundtrip validation)
- validate: Run the roundtrip check and show differences
- escape: Show how a string is sanitized for LaTeX
"""

from pathlib import Path

import typer
from dotenv import load_dotenv

from restex.contexts.templating.converter import (
    build_artifacts,
    generate_resume,
    load_resume_file,
    validate_roundtrip,
)
from restex.contexts.templating.sanitizer import escape
from restex.utils.text_processing import truncate_display

load_dotenv()

app = typer.Typer(
    add_completion=False,
    help="Build ATS-optimized LaTeX and plain-text resumes from resume JSON",
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("build")
def build_command(
    input_file: Path = typer.Argument(
        ...,
        help="Path to resume .json (or .yaml) file",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    output_dir: Path = typer.Option(
        Path("outs/resumes"),
        "--output-dir",
        "-o",
        help="Directory for the .tex and .txt outputs",
    ),
    no_validate: bool = typer.Option(
        False,
        "--no-validate",
        help="Skip the roundtrip validation",
    ),
):
    """
    Generate the LaTeX and plain-text resumes.

    Examples:\n

        $ build_resume.py build resume.json

        $ build_resume.py build resume.json -o out/ --no-validate
    """
    typer.secho(f"\nBuilding: {input_file.name}", fg=typer.colors.BLUE, bold=True)

    result = generate_resume(input_file, output_dir, validate=not no_validate)

    if not result.success:
        typer.secho(f"\n✗ Error: {result.error}", fg=typer.colors.RED, err=True)
        if result.log_dir:
            typer.echo(f"Logs: {result.log_dir}")
        raise typer.Exit(code=1)

    typer.secho("\n✓ Success!", fg=typer.colors.GREEN)
    typer.echo(f"LaTeX:      {result.latex_path}")
    typer.echo(f"Plain text: {result.plaintext_path}")
    if result.roundtrip_diffs is not None:
        typer.echo(f"Roundtrip diffs: {result.roundtrip_diffs}")
    typer.echo(f"Time: {result.time_s:.2f}s")


@app.command("validate")
def validate_command(
    input_file: Path = typer.Argument(
        ...,
        help="Path to resume .json (or .yaml) file",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
):
    """
    Check that the generated LaTeX reads back to the same resume.

    Example:\n

        $ build_resume.py validate resume.json
    """
    typer.secho(f"\nValidating: {input_file.name}", fg=typer.colors.BLUE, bold=True)

    try:
        artifacts = build_artifacts(load_resume_file(input_file))
        roundtrip = validate_roundtrip(artifacts.model)
    except Exception as e:
        typer.secho(f"\n✗ Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if roundtrip.success:
        typer.secho("✓ Roundtrip passed (0 diffs)", fg=typer.colors.GREEN)
        return

    typer.secho(f"✗ Roundtrip failed ({roundtrip.num_diffs} diffs)", fg=typer.colors.RED)
    for line in roundtrip.diff_lines:
        typer.echo(f"  {truncate_display(line, 120)}")
    raise typer.Exit(code=1)


@app.command("escape")
def escape_command(
    text: str = typer.Argument(..., help="Text to sanitize"),
):
    """
    Print the LaTeX-safe form of a string.

    Example:\n

        $ build_resume.py escape 'R&D \\input{/etc/passwd} 100%'
    """
    typer.echo(escape(text))


if __name__ == "__main__":
    app()
