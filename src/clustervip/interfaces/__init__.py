"""Abstract collaborators used by clustervip."""

from .network import (
    FixedIP,
    FloatingIP,
    FloatingIPCreateOpts,
    NetworkStore,
    Port,
    PortCreateOpts,
)

__all__ = [
    "FixedIP",
    "FloatingIP",
    "FloatingIPCreateOpts",
    "NetworkStore",
    "Port",
    "PortCreateOpts",
]
