"""Command-line interface for safetylayer."""

import json
import sys
import logging
from pathlib import Path
from typing import Optional

import click

from safetylayer import __version__
from safetylayer.config import load_config, load_secret_map, save_secret_map
from safetylayer.engine import Scanner
from safetylayer.errors import ScrubberError
from safetylayer.matchers import get_all_matchers
from safetylayer.models import Intensity
from safetylayer.restorer import count_by_type, restore as restore_text
from safetylayer.tokens import build_smart_copy_text

CATEGORY_NAMES = ["email", "credit-card", "phone", "ssn"]


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _read_input(text: Optional[str], path: Optional[Path], flag: str) -> str:
    if text is None and path is None:
        click.echo(f"Error: Must provide --text or {flag}", err=True)
        sys.exit(1)
    if path:
        return path.read_text(encoding="utf-8")
    assert text is not None
    return text


def _write_output(content: str, output_file: Optional[Path]) -> None:
    if output_file:
        output_file.write_text(content, encoding="utf-8")
    else:
        click.echo(content)


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """safetylayer: Replace PII with restorable tokens."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_logging(verbose)


@main.command()
@click.option(
    "--text",
    "-t",
    help="Text to scrub (use --file for file input)",
)
@click.option(
    "--file",
    "-f",
    type=click.Path(exists=True, path_type=Path),
    help="File to scrub",
)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Configuration file",
)
@click.option(
    "--intensity",
    type=click.Choice([i.value for i in Intensity]),
    help="Scrub intensity (overrides configuration)",
)
@click.option(
    "--disable",
    type=click.Choice(CATEGORY_NAMES),
    multiple=True,
    help="Category to skip (can be used multiple times)",
)
@click.option(
    "--strict",
    is_flag=True,
    help="Fail instead of passing text through when every category is disabled",
)
@click.option(
    "--map-out",
    type=click.Path(path_type=Path),
    help="Write the secret map to this JSON file",
)
@click.option(
    "--out",
    "output_file",
    type=click.Path(path_type=Path),
    help="Output file (prints to stdout if not specified)",
)
@click.option(
    "--output",
    "-o",
    type=click.Choice(["json", "text"]),
    default="text",
    help="Output format",
)
@click.option(
    "--smart-copy",
    is_flag=True,
    help="Prefix output with an instruction to keep placeholders intact",
)
@click.option(
    "--stats",
    is_flag=True,
    help="Print token counts per category",
)
@click.pass_context
def scrub(
    ctx: click.Context,
    text: Optional[str],
    file: Optional[Path],
    config: Optional[Path],
    intensity: Optional[str],
    disable: tuple[str, ...],
    strict: bool,
    map_out: Optional[Path],
    output_file: Optional[Path],
    output: str,
    smart_copy: bool,
    stats: bool,
) -> None:
    """Replace PII in text or file with tokens."""
    text = _read_input(text, file, "--file")

    try:
        settings = load_config(config)
    except ScrubberError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(2)

    options = settings.options.merged(
        **{name.replace("-", "_"): False for name in disable}
    )
    scanner = Scanner(
        options,
        Intensity(intensity) if intensity else settings.intensity,
        strict=strict or settings.strict,
        reuse_tokens=settings.reuse_tokens,
    )

    try:
        result = scanner.scrub(text)
    except ScrubberError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(2)

    if map_out:
        save_secret_map(map_out, result.secret_map)

    sanitized = result.sanitized_text
    if smart_copy or settings.smart_copy:
        sanitized = build_smart_copy_text(sanitized)

    if output == "json":
        _write_output(
            json.dumps(
                {
                    "sanitized_text": sanitized,
                    "intensity": result.intensity.value,
                    "categories_scanned": [c.value for c in result.categories_scanned],
                    "secret_map": [entry.to_dict() for entry in result.secret_map],
                },
                indent=2,
            ),
            output_file,
        )
    else:
        _write_output(sanitized, output_file)

    if stats:
        counts = count_by_type(result.secret_map)
        summary = ", ".join(f"{c.value}: {n}" for c, n in counts.items()) or "none"
        click.echo(f"\n[Tokenized {result.match_count} items: {summary}]", err=True)


@main.command()
@click.option(
    "--text",
    "-t",
    help="Text to restore (use --in for file input)",
)
@click.option(
    "--in",
    "input_file",
    type=click.Path(exists=True, path_type=Path),
    help="Input file to restore",
)
@click.option(
    "--map",
    "-m",
    "map_file",
    required=True,
    type=click.Path(exists=True, path_type=Path),
    help="Secret map JSON written by scrub --map-out",
)
@click.option(
    "--out",
    "output_file",
    type=click.Path(path_type=Path),
    help="Output file (prints to stdout if not specified)",
)
def restore(
    text: Optional[str],
    input_file: Optional[Path],
    map_file: Path,
    output_file: Optional[Path],
) -> None:
    """Put original values back in place of tokens."""
    text = _read_input(text, input_file, "--in")

    try:
        secret_map = load_secret_map(map_file)
        restored = restore_text(text, secret_map)
    except ScrubberError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(2)

    _write_output(restored, output_file)


@main.command()
@click.option(
    "--map",
    "-m",
    "map_file",
    required=True,
    type=click.Path(exists=True, path_type=Path),
    help="Secret map JSON written by scrub --map-out",
)
def count(map_file: Path) -> None:
    """Count tokens per category in a secret map."""
    try:
        secret_map = load_secret_map(map_file)
    except ScrubberError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(2)

    click.echo(f"{len(secret_map)} tokens")
    for category, n in count_by_type(secret_map).items():
        click.echo(f"  {category.value:<8} {n}")


@main.command()
def list_patterns() -> None:
    """List PII categories in priority order."""
    for priority, matcher in enumerate(get_all_matchers(), start=1):
        click.echo(
            f"  {priority}. {matcher.token_tag:<8} [{matcher.token_tag}_N]  {matcher.description}"
        )


if __name__ == "__main__":
    main()
