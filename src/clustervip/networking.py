"""
Port and floating IP reconciliation primitives.

Each function takes the network store explicitly and performs its calls
strictly in sequence. Nothing here retries: list errors surface as raised by
the store, create/update/delete errors are wrapped in ``ProvisioningError``
with the store error chained.
"""

from typing import List, Optional

import structlog

from clustervip.errors import AmbiguousPortError, ProvisioningError, StoreError
from clustervip.interfaces.network import (
    FixedIP,
    FloatingIP,
    FloatingIPCreateOpts,
    NetworkStore,
    Port,
    PortCreateOpts,
)
from clustervip.models import UnmanagedPort

log = structlog.get_logger(__name__)


# ── ports ────────────────────────────────────────────────────────────────────

def resolve_port(
    store: NetworkStore,
    name: str,
    network_id: str,
    subnet_id: str,
    fixed_ip: str = "",
    strict: bool = False,
) -> Port:
    """Return the port called ``name``, creating it on ``subnet_id`` if absent.

    When several ports share the name the first one in store order is reused,
    unless ``strict`` is set, in which case ``AmbiguousPortError`` is raised.
    """
    if not network_id:
        raise ValueError("network_id is required to resolve a port")
    if not subnet_id:
        raise ValueError("subnet_id is required to resolve a port")

    existing: List[Port] = store.list_ports(name=name)

    if not existing:
        log.info("creating port", name=name, network_id=network_id, fixed_ip=fixed_ip or None)
        opts = PortCreateOpts(
            name=name,
            network_id=network_id,
            fixed_ips=[FixedIP(subnet_id=subnet_id, ip_address=fixed_ip)],
        )
        try:
            return store.create_port(opts)
        except StoreError as e:
            raise ProvisioningError(f"error allocating VIP port: {e}") from e

    if len(existing) > 1:
        ids = [p.id for p in existing]
        if strict:
            raise AmbiguousPortError(name, ids)
        log.warning("multiple ports share the cluster port name, reusing the first",
                    name=name, port_ids=ids)

    port = existing[0]
    log.debug("reusing port", name=name, port_id=port.id)
    return port


def delete_port(store: NetworkStore, record: Optional[UnmanagedPort]) -> None:
    """Delete the recorded port. The floating IP it was bound to is left in place."""
    if record is None:
        return
    log.info("deleting port", name=record.name, port_id=record.id)
    try:
        store.delete_port(record.id)
    except StoreError as e:
        raise ProvisioningError(f"error while deleting port: {e}") from e


# ── floating IPs ─────────────────────────────────────────────────────────────

def find_floating_ip(
    store: NetworkStore, address: str, port_id: Optional[str] = None
) -> Optional[FloatingIP]:
    """Find a floating IP by address. ``None`` means it has to be created.

    Without an address the floating IP already bound to ``port_id`` is
    returned, so a provider-assigned address is reused on later runs.
    """
    if not address and not port_id:
        return None
    for fip in store.list_floating_ips():
        if address:
            if fip.floating_ip_address == address:
                return fip
        elif fip.port_id == port_id:
            return fip
    return None


def bind_floating_ip(
    store: NetworkStore,
    desired_address: str,
    external_network_id: str,
    port_id: str,
) -> Optional[FloatingIP]:
    """Find or allocate ``desired_address`` and associate it with ``port_id``.

    Returns ``None`` without touching the store when no external network is
    configured. The association update is always sent, so a floating IP
    bound elsewhere is moved back to ``port_id``.
    """
    if not external_network_id:
        log.debug("no external network, skipping floating ip")
        return None

    fip = find_floating_ip(store, desired_address, port_id=port_id)

    if fip is None:
        log.info("creating floating ip", ip=desired_address or None,
                 network_id=external_network_id)
        opts = FloatingIPCreateOpts(
            floating_network_id=external_network_id,
            floating_ip_address=desired_address,
        )
        try:
            fip = store.create_floating_ip(opts)
        except StoreError as e:
            raise ProvisioningError(f"error allocating floating IP: {e}") from e

    log.info("associating floating ip", ip=fip.floating_ip_address,
             floating_ip_id=fip.id, port_id=port_id)
    try:
        return store.update_floating_ip(fip.id, port_id)
    except StoreError as e:
        raise ProvisioningError(f"error associating floating IP: {e}") from e


# ── status ───────────────────────────────────────────────────────────────────

def build_unmanaged_port(port: Port, fip: Optional[FloatingIP]) -> UnmanagedPort:
    """Status record for a resolved port and its bound floating IP."""
    return UnmanagedPort(
        name=port.name,
        id=port.id,
        ip=fip.floating_ip_address if fip is not None else "",
    )
