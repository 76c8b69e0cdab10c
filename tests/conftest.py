"""
Pytest fixtures and configuration for clustervip tests.
"""
import os
from dataclasses import replace
from typing import Dict, List, Optional

import pytest
import yaml

from clustervip.errors import StoreError
from clustervip.interfaces.network import (
    FixedIP,
    FloatingIP,
    FloatingIPCreateOpts,
    NetworkStore,
    Port,
    PortCreateOpts,
)
from clustervip.models import OpenStackCluster


class FakeNetworkStore(NetworkStore):
    """In-memory network store recording every call made against it.

    Identifiers are handed out as P1, P2, ... for ports and F1, F2, ... for
    floating IPs. ``fail_on`` maps an operation name to the exception it raises.
    """

    def __init__(self):
        self.ports: List[Port] = []
        self.floating_ips: List[FloatingIP] = []
        self.calls: List[str] = []
        self.fail_on: Dict[str, Exception] = {}
        self._port_seq = 0
        self._fip_seq = 0

    def _record(self, op: str) -> None:
        self.calls.append(op)
        if op in self.fail_on:
            raise self.fail_on[op]

    def count(self, op: str) -> int:
        return self.calls.count(op)

    def list_ports(self, name: Optional[str] = None) -> List[Port]:
        self._record("list_ports")
        return [replace(p) for p in self.ports if name is None or p.name == name]

    def create_port(self, opts: PortCreateOpts) -> Port:
        self._record("create_port")
        self._port_seq += 1
        port = Port(
            id=f"P{self._port_seq}",
            name=opts.name,
            network_id=opts.network_id,
            fixed_ips=[FixedIP(ip.subnet_id, ip.ip_address) for ip in opts.fixed_ips],
            status="DOWN",
        )
        self.ports.append(port)
        return replace(port)

    def delete_port(self, port_id: str) -> None:
        self._record("delete_port")
        remaining = [p for p in self.ports if p.id != port_id]
        if len(remaining) == len(self.ports):
            raise StoreError(f"Port {port_id} could not be found.", status_code=404)
        self.ports = remaining
        # Neutron disassociates floating IPs of a deleted port.
        for fip in self.floating_ips:
            if fip.port_id == port_id:
                fip.port_id = None

    def list_floating_ips(self) -> List[FloatingIP]:
        self._record("list_floating_ips")
        return [replace(f) for f in self.floating_ips]

    def create_floating_ip(self, opts: FloatingIPCreateOpts) -> FloatingIP:
        self._record("create_floating_ip")
        self._fip_seq += 1
        address = opts.floating_ip_address or f"198.51.100.{self._fip_seq}"
        if any(f.floating_ip_address == address for f in self.floating_ips):
            raise StoreError(f"IP address {address} already allocated", status_code=409)
        fip = FloatingIP(
            id=f"F{self._fip_seq}",
            floating_ip_address=address,
            floating_network_id=opts.floating_network_id,
            status="DOWN",
        )
        self.floating_ips.append(fip)
        return replace(fip)

    def update_floating_ip(self, floating_ip_id: str, port_id: Optional[str]) -> FloatingIP:
        self._record("update_floating_ip")
        for fip in self.floating_ips:
            if fip.id == floating_ip_id:
                fip.port_id = port_id
                return replace(fip)
        raise StoreError(f"Floating IP {floating_ip_id} could not be found.", status_code=404)


@pytest.fixture
def fake_store():
    """Empty in-memory network store."""
    return FakeNetworkStore()


@pytest.fixture
def demo_cluster_data():
    """Cluster 'demo' with a subnet and an external network configured."""
    return {
        "name": "demo",
        "spec": {
            "external_network_id": "ext-net",
            "api_server_floating_ip": "203.0.113.10",
            "control_plane_internal_ip": "10.0.0.5",
        },
        "status": {
            "network": {
                "id": "net-1",
                "name": "openstack-cluster-demo",
                "subnet": {"id": "sub-1", "name": "openstack-cluster-demo", "cidr": "10.0.0.0/24"},
            }
        },
    }


@pytest.fixture
def demo_cluster(demo_cluster_data):
    return OpenStackCluster.model_validate(demo_cluster_data)


@pytest.fixture
def cluster_file(tmp_path, demo_cluster_data):
    """Write the demo cluster to a YAML file."""
    path = tmp_path / "cluster.yaml"
    path.write_text(yaml.safe_dump(demo_cluster_data))
    return path


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Keep tests away from the user's real settings file and environment."""
    monkeypatch.setenv("CLUSTERVIP_CONFIG", str(tmp_path / "missing-cloud.yaml"))
    for key in list(os.environ):
        if key.startswith("CLUSTERVIP_") and key != "CLUSTERVIP_CONFIG":
            monkeypatch.delenv(key, raising=False)
