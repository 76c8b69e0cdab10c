"""Interfaces for the external network resource store."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class FixedIP:
    """A fixed address binding of a port inside a subnet."""

    subnet_id: str
    ip_address: str = ""


@dataclass
class Port:
    """Port as returned by the store."""

    id: str
    name: str
    network_id: str
    fixed_ips: List[FixedIP] = field(default_factory=list)
    status: str = ""
    device_owner: str = ""


@dataclass
class FloatingIP:
    """Floating IP as returned by the store. Floating IPs have no user-assigned name."""

    id: str
    floating_ip_address: str
    floating_network_id: str
    port_id: Optional[str] = None
    fixed_ip_address: Optional[str] = None
    status: str = ""


@dataclass
class PortCreateOpts:
    name: str
    network_id: str
    fixed_ips: List[FixedIP] = field(default_factory=list)


@dataclass
class FloatingIPCreateOpts:
    floating_network_id: str
    # Empty lets the provider pick an address from the pool.
    floating_ip_address: str = ""


class NetworkStore(ABC):
    """Abstract interface for port and floating IP operations.

    Implementations raise ``StoreError`` for transport or store-side failures.
    """

    @abstractmethod
    def list_ports(self, name: Optional[str] = None) -> List[Port]:
        """List ports, optionally filtered by exact name, in store order."""
        pass

    @abstractmethod
    def create_port(self, opts: PortCreateOpts) -> Port:
        """Create a port."""
        pass

    @abstractmethod
    def delete_port(self, port_id: str) -> None:
        """Delete a port by id."""
        pass

    @abstractmethod
    def list_floating_ips(self) -> List[FloatingIP]:
        """List all floating IPs visible to the project."""
        pass

    @abstractmethod
    def create_floating_ip(self, opts: FloatingIPCreateOpts) -> FloatingIP:
        """Allocate a floating IP on an external network."""
        pass

    @abstractmethod
    def update_floating_ip(self, floating_ip_id: str, port_id: Optional[str]) -> FloatingIP:
        """Point a floating IP at a port (``None`` disassociates it)."""
        pass
