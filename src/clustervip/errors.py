"""Exception hierarchy for clustervip."""

from typing import Optional


class NetworkingError(Exception):
    """Base class for every error raised while reconciling cluster networking."""


class StoreError(NetworkingError):
    """A list/create/update/delete call against the network store failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ProvisioningError(NetworkingError):
    """A side-effecting step failed; the original error is chained as ``__cause__``."""


class AmbiguousPortError(NetworkingError):
    """More than one port carries the deterministic cluster port name."""

    def __init__(self, name: str, port_ids):
        self.name = name
        self.port_ids = list(port_ids)
        super().__init__(
            f"found {len(self.port_ids)} ports named '{name}': {', '.join(self.port_ids)}"
        )


class ConfigError(ValueError):
    pass
