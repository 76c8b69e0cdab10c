#!/usr/bin/env python3
"""
Cluster-level VIP port reconciliation.

The VIP port is an unmanaged port used as the entry point for the cluster;
binding control plane nodes to it is left to their boot scripts.
"""

from typing import Optional

import structlog

from clustervip.interfaces.network import NetworkStore
from clustervip.logging import log_operation
from clustervip.models import OpenStackCluster
from clustervip.networking import (
    bind_floating_ip,
    build_unmanaged_port,
    delete_port,
    resolve_port,
)

log = structlog.get_logger(__name__)

DEFAULT_NETWORK_PREFIX = "openstack"


class NetworkingService:
    """Reconciles the VIP port and floating IP of clusters against a network store."""

    def __init__(
        self,
        store: NetworkStore,
        network_prefix: str = DEFAULT_NETWORK_PREFIX,
        strict_port_lookup: bool = False,
    ):
        self.store = store
        self.network_prefix = network_prefix
        self.strict_port_lookup = strict_port_lookup

    def port_name(self, cluster_name: str) -> str:
        """Deterministic VIP port name for a cluster."""
        return f"{self.network_prefix}-cluster-{cluster_name}"

    def reconcile_vip_port(self, cluster: OpenStackCluster) -> OpenStackCluster:
        """
        Ensure the cluster's VIP port and floating IP exist and are bound.

        Returns the cluster with ``status.network.unmanaged_port`` set, or the
        cluster unchanged when there is nothing to reconcile. The input object
        is never mutated, so a failure at any step leaves no partial status.
        """
        if not cluster.subnet_id:
            log.debug("No need to reconcile VIP port since no subnet exists", cluster=cluster.name)
            return cluster
        if not cluster.spec.external_network_id:
            log.info("No need to create VIP port, due to missing external network",
                     cluster=cluster.name)
            return cluster

        name = self.port_name(cluster.name)
        network = cluster.status.network

        with log_operation(log, "reconcile_vip_port", cluster=cluster.name, port_name=name):
            port = resolve_port(
                self.store,
                name=name,
                network_id=network.id,
                subnet_id=network.subnet.id,
                fixed_ip=cluster.spec.control_plane_internal_ip,
                strict=self.strict_port_lookup,
            )
            fip = bind_floating_ip(
                self.store,
                desired_address=cluster.spec.api_server_floating_ip,
                external_network_id=cluster.spec.external_network_id,
                port_id=port.id,
            )

        return cluster.with_unmanaged_port(build_unmanaged_port(port, fip))

    def delete_vip_port(self, cluster: OpenStackCluster) -> OpenStackCluster:
        """Delete the recorded VIP port and drop it from the cluster status."""
        record = cluster.unmanaged_port
        if record is None:
            return cluster

        with log_operation(log, "delete_vip_port", cluster=cluster.name, port_id=record.id):
            delete_port(self.store, record)

        return cluster.with_unmanaged_port(None)


def create_service(settings, store: Optional[NetworkStore] = None) -> NetworkingService:
    """Build a service from settings, connecting to Neutron unless a store is given."""
    if store is None:
        from clustervip.backends.neutron import NeutronNetworkStore

        store = NeutronNetworkStore.from_settings(settings)
    return NetworkingService(
        store,
        network_prefix=settings.network_prefix,
        strict_port_lookup=settings.strict_port_lookup,
    )
