"""
Command-line interface for building and querying similarity stores.

Triple files hold one ``entity_a,entity_b,value`` row per line and must be
UTF-8. Blank lines and lines whose text starts with ``#`` are comments; an
entity name that starts with ``#`` must be quoted (``"#tag",b,0.5``).
"""

import csv
import math
from pathlib import Path
from typing import List, Optional

import click
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import StoreConfig, resolve_config
from .errors import PairStoreError
from .pairs import PairScore
from .store import SymmetricPairStore
from .utils.logging_setup import get_logger, log_operation, setup_logging

console = Console()


def _parse_row(path: Path, line_number: int, row: List[str]) -> PairScore:
    if len(row) != 3:
        raise click.UsageError(
            f"{path}:{line_number}: expected 3 fields, got {len(row)}"
        )
    entity_a, entity_b, raw_value = (field.strip() for field in row)
    try:
        value = float(raw_value)
    except ValueError:
        raise click.UsageError(f"{path}:{line_number}: not a number: {raw_value!r}")
    try:
        return PairScore(entity_a or None, entity_b or None, value)
    except PairStoreError as exc:
        raise click.UsageError(f"{path}:{line_number}: {exc.message}")


def read_pairs(path: Path, delimiter: str = ",") -> List[PairScore]:
    """
    Read scored pairs from a delimited text file.

    Raises:
        click.UsageError: the file is not UTF-8, or a row is malformed or
            holds an illegal value
    """
    pairs: List[PairScore] = []
    with open(path, "r", newline="", encoding="utf-8") as f:
        try:
            for line_number, line in enumerate(f, start=1):
                text = line.strip()
                if not text or text.startswith("#"):
                    continue
                row = next(csv.reader([line], delimiter=delimiter))
                pairs.append(_parse_row(path, line_number, row))
        except UnicodeDecodeError as exc:
            raise click.UsageError(
                f"{path}: not valid UTF-8 ({exc.reason}); re-save the file as UTF-8"
            )
    return pairs


def _load_config(config_path: Optional[str]) -> StoreConfig:
    try:
        config = resolve_config(config_path)
    except PairStoreError as exc:
        raise click.ClickException(exc.message)
    setup_logging('pairstore', level=config.log_level, log_dir=config.log_dir,
                  json_format=config.log_json)
    return config


def _build_store(path: str, top: Optional[int], config: StoreConfig) -> SymmetricPairStore:
    pairs = read_pairs(Path(path), config.delimiter)
    max_to_keep = top if top is not None else config.max_to_keep
    try:
        return SymmetricPairStore(pairs, max_to_keep=max_to_keep)
    except PairStoreError as exc:
        raise click.UsageError(exc.message)


@click.group(name="pairstore")
@click.version_option(__version__, prog_name="pairstore")
def main():
    """Build and query symmetric pairwise similarity stores.

    Triple files hold UTF-8 `a,b,value` rows. Lines starting with # are
    comments, so quote entity names that begin with #.
    """
    pass


@main.command(name="build")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--top", "-k", type=click.IntRange(min=1), help="Keep only the strongest K pairs")
@click.option("--config", "config_path", type=click.Path(), help="Path to config file")
def build_command(path, top, config_path):
    """Build a store from PATH and list the pairs it holds."""
    config = _load_config(config_path)
    log_operation(get_logger(__name__), "build", path=path, top=top)
    store = _build_store(path, top, config)

    table = Table(title=f"{len(store)} stored pairs")
    table.add_column("Entity A", style="cyan")
    table.add_column("Entity B", style="cyan")
    table.add_column("Similarity", justify="right", style="green")
    for pair in sorted(store.pairs()):
        table.add_row(str(pair.entity_a), str(pair.entity_b), f"{pair.value:.4f}")
    console.print(table)


@main.command(name="lookup")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.argument("entity_a")
@click.argument("entity_b")
@click.option("--top", "-k", type=click.IntRange(min=1), help="Keep only the strongest K pairs")
@click.option("--config", "config_path", type=click.Path(), help="Path to config file")
def lookup_command(path, entity_a, entity_b, top, config_path):
    """Print the similarity between ENTITY_A and ENTITY_B."""
    config = _load_config(config_path)
    log_operation(get_logger(__name__), "lookup", path=path, top=top)
    store = _build_store(path, top, config)
    value = store.similarity(entity_a, entity_b)
    if math.isnan(value):
        console.print("nan")
    else:
        console.print(f"{value:.6g}")


@main.group(name="config")
def config_group():
    """Manage pairstore configuration."""
    pass


@config_group.command(name="init")
@click.option(
    "--path",
    type=click.Path(),
    default=".pairstore.yml",
    help="Path for config file"
)
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def config_init(path, force):
    """Write a default configuration file."""
    config_path = Path(path)
    if config_path.exists() and not force:
        if not click.confirm(f"Config file {path} already exists. Overwrite?"):
            console.print("[yellow]Aborted[/yellow]")
            return

    StoreConfig().save_to_file(config_path)
    console.print(f"[green]Created config file at {path}[/green]")


@config_group.command(name="show")
@click.option(
    "--path",
    type=click.Path(exists=True),
    help="Path to config file"
)
def config_show(path):
    """Display the effective configuration."""
    try:
        config = resolve_config(path)
    except PairStoreError as exc:
        raise click.ClickException(exc.message)

    table = Table(title="pairstore configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for key, value in config.to_dict().items():
        table.add_row(key, repr(value))
    console.print(table)


if __name__ == "__main__":
    main()
