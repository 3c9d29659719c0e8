from __future__ import annotations

import sys
import tempfile
from pathlib import Path
from typing import Optional

import typer

from asbottleneck.config import DEFAULT_BIN_WIDTH, ENV_PREFIX, LocateConfig
from asbottleneck.datasources.text_paths import load_text_paths
from asbottleneck.errors import BottleneckError
from asbottleneck.output.export import save_result, write_bottleneck
from asbottleneck.processing.resolver import find_as_bottleneck
from asbottleneck.processing.windower import locate as run_locate
from asbottleneck.utils.logging import configure_logging, get_logger

app = typer.Typer(help="Find the bottleneck AS of every prefix in BGP RIB (MRT) dumps.")

log = get_logger(__name__)


def _fail(err: BottleneckError) -> None:
    log.debug("Run aborted", exc_info=err)
    typer.secho(f"Error: {err}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.command()
def locate(
        sorted_dir: Path = typer.Argument(
            ...,
            exists=True,
            file_okay=False,
            help="Directory of gzip MRT RIB dumps sorted by prefix.",
        ),
        unsorted_dir: Path = typer.Argument(
            ...,
            exists=True,
            file_okay=False,
            help="Directory of gzip MRT RIB dumps with no ordering guarantee.",
        ),
        output: Optional[Path] = typer.Option(
            None,
            "--output",
            "-o",
            envvar=ENV_PREFIX + "OUTPUT_DIR",
            help="Directory for bottleneck.<epoch>.txt (default: current directory).",
        ),
        bin_width: int = typer.Option(
            DEFAULT_BIN_WIDTH,
            "--bin-width",
            "-w",
            envvar=ENV_PREFIX + "BIN_WIDTH",
            help="Leading-byte range processed per batch; a power of two up to 256.",
        ),
        strict_order: bool = typer.Option(
            False,
            "--strict-order/--lenient-order",
            envvar=ENV_PREFIX + "STRICT_ORDER",
            help="Fail if a sorted dump is not ordered by prefix instead of carrying on.",
        ),
        verbose: int = typer.Option(
            0,
            "--verbose",
            "-v",
            count=True,
            help="-v for progress, -vv for per-entry diagnostics.",
        ),
):
    """
    Resolve the bottleneck AS of every prefix and write bottleneck.<epoch>.txt.

    Example:

        asbottleneck locate ribs/sorted ribs/unsorted -o results/
    """
    configure_logging(verbose)
    config = LocateConfig(
        sorted_dir=sorted_dir,
        unsorted_dir=unsorted_dir,
        output_dir=output,
        bin_width=bin_width,
        strict_order=strict_order,
    )

    try:
        config.validate()
        # 1) stream everything into a scratch file
        with tempfile.TemporaryFile(mode="w+", encoding="utf-8", newline="\n") as tmp:
            written = run_locate(config, tmp)
            # 2) copy it to its final name
            dst = save_result(tmp, config.output_dir)
    except BottleneckError as e:
        _fail(e)

    typer.echo(f"Wrote {written} prefixes to {dst}")


@app.command()
def resolve(
        paths_file: Path = typer.Argument(
            ...,
            exists=True,
            dir_okay=False,
            help="Text file of 'prefix|asn asn ...' lines, one AS path per line.",
        ),
        verbose: int = typer.Option(0, "--verbose", "-v", count=True),
):
    """
    Resolve bottlenecks from AS paths in text form and print them to stdout.
    """
    configure_logging(verbose)
    try:
        batch = load_text_paths(paths_file)
        write_bottleneck(find_as_bottleneck(batch), sys.stdout)
    except BottleneckError as e:
        _fail(e)


def main() -> None:
    """Entry point for console_scripts."""
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Interrupted by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
