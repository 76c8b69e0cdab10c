#!/usr/bin/env python3
"""
Pydantic models for the managed cluster object and its persisted network status.
"""

import ipaddress
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from clustervip.errors import ConfigError


def _validate_optional_ip(v: str) -> str:
    v = (v or "").strip()
    if v:
        try:
            ipaddress.ip_address(v)
        except ValueError:
            raise ValueError(f"Invalid IP address: {v}")
    return v


class UnmanagedPort(BaseModel):
    """Snapshot of the VIP port and its floating IP, written once reconciliation succeeds."""

    name: str = Field(description="Port name")
    id: str = Field(description="Port identifier in the network store")
    ip: str = Field(default="", description="Floating IP address bound to the port")


class Subnet(BaseModel):
    id: str = ""
    name: str = ""
    cidr: str = ""


class ClusterNetwork(BaseModel):
    """Network status of a cluster."""

    id: str = Field(default="", description="Cluster network identifier")
    name: str = ""
    subnet: Optional[Subnet] = None
    unmanaged_port: Optional[UnmanagedPort] = Field(
        default=None, description="VIP port created for the cluster"
    )


class OpenStackClusterSpec(BaseModel):
    """Desired state of the cluster's API entry point."""

    external_network_id: str = Field(
        default="", description="External network for floating IPs; empty disables the VIP port"
    )
    api_server_floating_ip: str = Field(
        default="", description="Desired floating IP; empty lets the provider assign one"
    )
    control_plane_internal_ip: str = Field(
        default="", description="Fixed IP of the VIP port inside the cluster subnet"
    )

    @field_validator("api_server_floating_ip", "control_plane_internal_ip")
    @classmethod
    def ip_must_be_valid(cls, v: str) -> str:
        return _validate_optional_ip(v)


class OpenStackClusterStatus(BaseModel):
    network: Optional[ClusterNetwork] = None


class OpenStackCluster(BaseModel):
    """A declaratively-managed cluster object."""

    name: str = Field(description="Cluster name")
    spec: OpenStackClusterSpec = Field(default_factory=OpenStackClusterSpec)
    status: OpenStackClusterStatus = Field(default_factory=OpenStackClusterStatus)

    @field_validator("name")
    @classmethod
    def name_must_be_valid(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Cluster name cannot be empty")
        if len(v) > 64:
            raise ValueError("Cluster name must be <= 64 characters")
        return v.strip()

    @property
    def subnet_id(self) -> str:
        network = self.status.network
        if network is None or network.subnet is None:
            return ""
        return network.subnet.id

    @property
    def unmanaged_port(self) -> Optional[UnmanagedPort]:
        network = self.status.network
        return network.unmanaged_port if network is not None else None

    def with_unmanaged_port(self, record: Optional[UnmanagedPort]) -> "OpenStackCluster":
        """Return a copy of the cluster whose network status carries ``record``."""
        if self.status.network is None:
            raise ValueError(f"Cluster '{self.name}' has no network status")
        cluster = self.model_copy(deep=True)
        cluster.status.network.unmanaged_port = record
        return cluster

    def save(self, path: Path) -> None:
        """Save the cluster object to a YAML file."""
        data = self.model_dump(exclude_none=True)
        path.write_text(yaml.safe_dump(data, default_flow_style=False, sort_keys=False))

    @classmethod
    def load(cls, path: Path) -> "OpenStackCluster":
        """Load a cluster object from a YAML file."""
        if not path.exists():
            raise FileNotFoundError(f"Cluster file not found: {path}")
        try:
            data = yaml.safe_load(path.read_text())
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse cluster file {path}: {e}")
        if not isinstance(data, dict):
            raise ConfigError(f"Cluster file must be a YAML mapping: {path}")
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(str(e))

