"""CLI for the vault index."""

import json
import logging
from enum import StrEnum
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.traceback import install

from vault_index.core import VaultBuilder, VaultRecord, VaultRegistry
from vault_index.data import (
    SnapshotError,
    get_all_supported_chains,
    get_chain_config,
    get_chain_id,
    get_chain_name,
    get_default_meta_path,
    get_registry_addresses,
    load_vault_snapshot,
)
from vault_index.integrations import YearnAPIClient, YearnAPIError, refresh_analytics
from vault_index.stores import AnalyticsStore, MetaStore, MetaStoreError, load_meta_file

# Install rich traceback handler
install(show_locals=False)

app = typer.Typer(
    name="vault-index",
    help="Build and inspect the normalized, enriched vault index",
    add_completion=False,
)

console = Console()
error_console = Console(stderr=True)


class OutputFormat(StrEnum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, rich_tracebacks=True)],
        force=True,
    )


def _resolve_chain(chain: str) -> int:
    """
    Turn a chain name or numeric ID into a chain ID.

    Raises
    ------
    typer.BadParameter
        If the chain is not configured

    """
    if chain.isdigit():
        return int(chain)
    try:
        return get_chain_id(chain.lower())
    except KeyError:
        msg = f"Unknown chain '{chain}'. Supported: {', '.join(get_all_supported_chains())}"
        raise typer.BadParameter(msg) from None


def _build_index(
    snapshot: Path,
    meta: Path | None,
    chain_id: int | None,
    fetch_apy: bool,
) -> tuple[list[int], MetaStore]:
    """
    Load raw vaults and curated metadata, then build the registry.

    Returns
    -------
    tuple[list[int], MetaStore]
        Chain IDs that were ingested and the curated metadata used

    """
    meta_store = MetaStore()
    meta_path = meta or get_default_meta_path()
    if meta_path is not None:
        load_meta_file(meta_path, meta_store)

    raw_vaults = load_vault_snapshot(snapshot)
    if chain_id is not None:
        raw_vaults = {chain_id: raw_vaults.get(chain_id, [])}

    analytics_store = AnalyticsStore()
    if fetch_apy:
        with YearnAPIClient() as client:
            for target_chain in raw_vaults:
                refresh_analytics(analytics_store, target_chain, client)

    builder = VaultBuilder(meta_store=meta_store, analytics_store=analytics_store)
    for target_chain, vaults in raw_vaults.items():
        builder.ingest(target_chain, vaults)
    return list(raw_vaults), meta_store


def _listed_vaults(chain_id: int, meta_store: MetaStore) -> list[VaultRecord]:
    """
    Get the vaults of a chain as they should be listed.

    Vaults curated with ``hide_always`` are left out. The rest are sorted by
    curated order, then address, since registry order is unspecified.

    """
    listed = []
    for vault in VaultRegistry.list_vaults(chain_id):
        vault_meta = meta_store.get_vault(chain_id, vault.address)
        if vault_meta is not None and vault_meta.hide_always:
            continue
        order = vault_meta.order if vault_meta is not None else 0.0
        listed.append((order, vault.address, vault))
    return [vault for _, _, vault in sorted(listed, key=lambda item: item[:2])]


def _chain_label(chain_id: int) -> str:
    return get_chain_name(chain_id) or str(chain_id)


@app.command()
def vaults(
    snapshot: Path = typer.Option(..., "--snapshot", "-s", help="Raw vault snapshot (YAML or JSON)"),
    meta: Path | None = typer.Option(None, "--meta", "-m", help="Curated metadata file (YAML)"),
    chain: str | None = typer.Option(None, "--chain", "-c", help="Chain name or ID to show"),
    format: OutputFormat = typer.Option(OutputFormat.TABLE, "--format", "-f", help="Output format"),
    fetch_apy: bool = typer.Option(False, "--fetch-apy", help="Fetch APY from the Yearn API"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug output"),
) -> None:
    """
    List the normalized vaults of a snapshot.

    Examples:

        # All chains in the snapshot
        vault-index vaults --snapshot vaults.yaml --meta meta.yaml

        # One chain, as JSON
        vault-index vaults --snapshot vaults.yaml --chain ethereum --format json
    """
    _configure_logging(debug)
    chain_id = _resolve_chain(chain) if chain else None

    try:
        chain_ids, meta_store = _build_index(snapshot, meta, chain_id, fetch_apy)
    except (SnapshotError, MetaStoreError, YearnAPIError) as e:
        error_console.print(f"[bold red]Error:[/bold red] {e}")
        if debug:
            raise
        raise typer.Exit(1)

    by_chain = {target_chain: _listed_vaults(target_chain, meta_store) for target_chain in sorted(chain_ids)}

    if format == OutputFormat.JSON:
        _output_json(by_chain)
    else:
        _output_table(by_chain)


@app.command()
def show(
    address: str = typer.Argument(..., help="Vault address"),
    snapshot: Path = typer.Option(..., "--snapshot", "-s", help="Raw vault snapshot (YAML or JSON)"),
    meta: Path | None = typer.Option(None, "--meta", "-m", help="Curated metadata file (YAML)"),
    chain: str = typer.Option("ethereum", "--chain", "-c", help="Chain name or ID"),
    fetch_apy: bool = typer.Option(False, "--fetch-apy", help="Fetch APY from the Yearn API"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug output"),
) -> None:
    """Show one normalized vault as JSON."""
    _configure_logging(debug)
    chain_id = _resolve_chain(chain)

    try:
        _build_index(snapshot, meta, chain_id, fetch_apy)
    except (SnapshotError, MetaStoreError, YearnAPIError) as e:
        error_console.print(f"[bold red]Error:[/bold red] {e}")
        if debug:
            raise
        raise typer.Exit(1)

    vault, found = VaultRegistry.find(chain_id, address)
    if not found:
        error_console.print(f"[yellow]Vault {address} not found on {_chain_label(chain_id)}[/yellow]")
        raise typer.Exit(1)

    typer.echo(json.dumps(vault.model_dump(mode="json"), indent=2))


@app.command()
def list_chains(
    format: OutputFormat = typer.Option(OutputFormat.TABLE, "--format", "-f", help="Output format"),
) -> None:
    """List all supported chains with their explorer and vault registries."""
    chains = [
        {
            "chain": name,
            "chain_id": get_chain_config(name)["chain_id"],
            "explorer": get_chain_config(name).get("explorer", ""),
            "registries": get_registry_addresses(name),
        }
        for name in get_all_supported_chains()
    ]

    if format == OutputFormat.JSON:
        typer.echo(json.dumps(chains, indent=2))
        return

    table = Table(title="Supported Chains", show_header=True, header_style="bold magenta")
    table.add_column("Chain", style="cyan")
    table.add_column("Chain ID", style="green", justify="right")
    table.add_column("Explorer", style="blue")
    table.add_column("Registries", style="yellow")

    for chain in chains:
        table.add_row(chain["chain"], str(chain["chain_id"]), chain["explorer"], "\n".join(chain["registries"]))

    console.print(table)


def _output_table(by_chain: dict[int, list[VaultRecord]]) -> None:
    """Output vaults as rich tables, one per chain."""
    if not any(by_chain.values()):
        console.print("\n[yellow]No vaults found[/yellow]")
        return

    for chain_id, chain_vaults in by_chain.items():
        table = Table(
            title=f"Vaults on {_chain_label(chain_id)}",
            show_header=True,
            header_style="bold magenta",
        )
        table.add_column("Address", style="cyan")
        table.add_column("Symbol", style="green")
        table.add_column("Name", style="white")
        table.add_column("Version", style="blue")
        table.add_column("Net APY", style="bold green", justify="right")
        table.add_column("Migration", style="yellow")

        for vault in chain_vaults:
            migration = vault.migration.address if vault.migration.available else "-"
            table.add_row(
                vault.address,
                vault.display_symbol,
                vault.formatted_name,
                vault.version,
                f"{vault.apy.net_apy:.2%}",
                migration,
            )

        console.print(table)


def _output_json(by_chain: dict[int, list[VaultRecord]]) -> None:
    """Output vaults as JSON, keyed by chain ID."""
    data = {
        str(chain_id): [vault.model_dump(mode="json") for vault in chain_vaults]
        for chain_id, chain_vaults in by_chain.items()
    }
    typer.echo(json.dumps(data, indent=2))


if __name__ == "__main__":
    app()
