#!/usr/bin/env python3
"""Command line entry point."""

import functools
import logging
import sys
from pathlib import Path

import click
from rich.logging import RichHandler

from hbind import cache
from hbind.acquire import acquire
from hbind.config import HbindConfig
from hbind.console import Console
from hbind.errors import HbindError
from hbind.pipeline import generate_bindings
from hbind.typedefs import resolve_typedefs


def load_config(config_path: Path | None, cache_dir: Path | None, no_cache: bool) -> HbindConfig:
    if config_path is not None:
        config = HbindConfig.load_from_file(config_path)
    else:
        config = HbindConfig.find_config(Path.cwd()) or HbindConfig()

    if cache_dir is not None:
        config.cache_directory = cache_dir
    if no_cache:
        config.use_cache = False
    return config


def config_options(func):
    """Options shared by every command that runs the parser."""

    @click.option(
        "--config",
        "config_path",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help="Path to hbind_config.json (searched upwards from cwd by default)",
    )
    @click.option("--cache-dir", type=click.Path(file_okay=False, path_type=Path), help="AST cache directory")
    @click.option("--no-cache", is_flag=True, help="Always run the parser")
    @functools.wraps(func)
    def wrapper(config_path, cache_dir, no_cache, **kwargs):
        return func(config=load_config(config_path, cache_dir, no_cache), **kwargs)

    return wrapper


def report_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (HbindError, FileNotFoundError) as e:
            Console(stderr=True).error(str(e))
            sys.exit(1)

    return wrapper


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log parser and cache activity")
def cli(verbose: bool):
    """hbind: C header to FFI symbol table."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )


@cli.command()
@click.argument("header", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Print the binding manifest as JSON")
@click.option("--library", type=click.Path(path_type=Path), help="Shared library path (default: header without .h)")
@config_options
@report_errors
def symbols(header: Path, as_json: bool, library: Path | None, config: HbindConfig):
    """Extract the function symbols declared in HEADER."""
    manifest = generate_bindings(header, config, library_path=library)

    if as_json:
        click.echo(manifest.model_dump_json(indent=2))
        return

    console = Console()
    console.symbols(manifest.symbols, title=f"{header.name} -> {manifest.library_path}")
    console.print(f"[green]{len(manifest.symbols)} symbols[/green]")


@cli.command()
@click.argument("header", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@config_options
@report_errors
def typedefs(header: Path, config: HbindConfig):
    """Print the resolved typedef table of HEADER."""
    table = resolve_typedefs(acquire(header, config))
    Console().typedefs(table, title=header.name)


@cli.command("clear-cache")
@config_options
def clear_cache(config: HbindConfig):
    """Remove every cached AST."""
    removed = cache.clear(config.cache_directory)
    click.echo(f"Removed {removed} cache entries from {config.cache_directory}")


if __name__ == "__main__":
    cli()
