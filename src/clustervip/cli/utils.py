#!/usr/bin/env python3
"""
Shared utilities for the clustervip CLI.
"""

from pathlib import Path

from rich.console import Console
from rich.table import Table

from clustervip.models import OpenStackCluster
from clustervip.service import NetworkingService, create_service
from clustervip.settings import CloudSettings

console = Console()


def load_settings(args) -> CloudSettings:
    """Load cloud settings, honouring --cloud-config and --strict."""
    path = Path(args.cloud_config).expanduser() if getattr(args, "cloud_config", None) else None
    settings = CloudSettings.load(path)
    if getattr(args, "strict", False):
        settings = settings.model_copy(update={"strict_port_lookup": True})
    return settings


def build_service(args) -> NetworkingService:
    return create_service(load_settings(args))


def load_cluster(path: str) -> OpenStackCluster:
    return OpenStackCluster.load(Path(path).expanduser())


def print_network_status(cluster: OpenStackCluster) -> None:
    """Render the cluster's network status as a table."""
    network = cluster.status.network
    if network is None:
        console.print(f"[dim]Cluster '{cluster.name}' has no network status[/]")
        return

    table = Table(title=f"Network status for {cluster.name}")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Network", network.id or "-")
    table.add_row("Subnet", network.subnet.id if network.subnet else "-")
    table.add_row("External network", cluster.spec.external_network_id or "-")

    port = network.unmanaged_port
    if port is None:
        table.add_row("VIP port", "[dim]not provisioned[/]")
    else:
        table.add_row("VIP port", f"{port.name} ({port.id})")
        table.add_row("Floating IP", port.ip or "-")

    console.print(table)
