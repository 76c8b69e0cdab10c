"""
clustervip - reconcile the VIP port and floating IP of a cluster on OpenStack.

Creates (or reuses) a deterministically named port on the cluster subnet,
binds a floating IP from the external network to it, and records the result
in the cluster's network status.
"""

__version__ = "0.1.0"

from clustervip.errors import (
    AmbiguousPortError,
    NetworkingError,
    ProvisioningError,
    StoreError,
)
from clustervip.models import OpenStackCluster, UnmanagedPort
from clustervip.service import NetworkingService

__all__ = [
    "AmbiguousPortError",
    "NetworkingError",
    "NetworkingService",
    "OpenStackCluster",
    "ProvisioningError",
    "StoreError",
    "UnmanagedPort",
    "__version__",
]
