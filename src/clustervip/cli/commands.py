#!/usr/bin/env python3
"""
VIP port commands for the clustervip CLI.
"""

from pathlib import Path

from clustervip.cli.utils import build_service, console, load_cluster, print_network_status


def cmd_reconcile(args):
    """Provision the VIP port and floating IP, then write the status back."""
    cluster = load_cluster(args.cluster_file)
    service = build_service(args)

    updated = service.reconcile_vip_port(cluster)

    if updated is cluster:
        console.print(f"[yellow]Nothing to reconcile for cluster '{cluster.name}'[/]")
        return

    updated.save(Path(args.cluster_file).expanduser())
    port = updated.unmanaged_port
    console.print(f"[green]✅ VIP port {port.name} ({port.id}) bound to {port.ip or '-'}[/]")


def cmd_delete(args):
    """Delete the recorded VIP port and clear it from the status."""
    cluster = load_cluster(args.cluster_file)
    if cluster.unmanaged_port is None:
        console.print(f"[dim]No VIP port recorded for cluster '{cluster.name}'[/]")
        return

    service = build_service(args)
    updated = service.delete_vip_port(cluster)
    updated.save(Path(args.cluster_file).expanduser())
    console.print(f"[green]✅ VIP port deleted for cluster '{cluster.name}'[/]")


def cmd_show(args):
    """Show the recorded network status."""
    print_network_status(load_cluster(args.cluster_file))
