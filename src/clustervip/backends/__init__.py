"""Network store implementations."""

from .neutron import NeutronNetworkStore

__all__ = ["NeutronNetworkStore"]
