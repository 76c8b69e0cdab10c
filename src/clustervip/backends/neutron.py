"""Neutron (OpenStack Networking v2.0) network store implementation."""

from typing import Any, Dict, List, Optional

import requests
import structlog

from clustervip.backends.keystone import authenticate
from clustervip.errors import ConfigError, StoreError
from clustervip.interfaces.network import (
    FixedIP,
    FloatingIP,
    FloatingIPCreateOpts,
    NetworkStore,
    Port,
    PortCreateOpts,
)

log = structlog.get_logger(__name__)

API_VERSION = "v2.0"


def _port_from_api(data: Dict[str, Any]) -> Port:
    return Port(
        id=data["id"],
        name=data.get("name", ""),
        network_id=data.get("network_id", ""),
        fixed_ips=[
            FixedIP(subnet_id=ip.get("subnet_id", ""), ip_address=ip.get("ip_address", ""))
            for ip in data.get("fixed_ips", [])
        ],
        status=data.get("status", ""),
        device_owner=data.get("device_owner", ""),
    )


def _floating_ip_from_api(data: Dict[str, Any]) -> FloatingIP:
    return FloatingIP(
        id=data["id"],
        floating_ip_address=data.get("floating_ip_address", ""),
        floating_network_id=data.get("floating_network_id", ""),
        port_id=data.get("port_id"),
        fixed_ip_address=data.get("fixed_ip_address"),
        status=data.get("status", ""),
    )


def _error_message(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text.strip() or resp.reason or ""
    if isinstance(body, dict) and isinstance(body.get("NeutronError"), dict):
        return body["NeutronError"].get("message", "")
    return resp.text.strip()


class NeutronNetworkStore(NetworkStore):
    """Network store talking to the Neutron REST API with a Keystone token."""

    name = "neutron"

    def __init__(
        self,
        endpoint: str,
        token: str,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        endpoint = endpoint.rstrip("/")
        if not endpoint.endswith(f"/{API_VERSION}"):
            endpoint = f"{endpoint}/{API_VERSION}"
        self.endpoint = endpoint
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({"X-Auth-Token": token, "Accept": "application/json"})

    @classmethod
    def from_settings(cls, settings, session: Optional[requests.Session] = None) -> "NeutronNetworkStore":
        """Authenticate as configured and return a store bound to the network endpoint."""
        if not settings.has_credentials():
            raise ConfigError("Either a token or a username and password must be configured")

        session = session or requests.Session()
        token = settings.token
        endpoint = settings.network_endpoint

        if not (token and endpoint):
            auth = authenticate(session, settings)
            token = auth.token
            if not endpoint:
                endpoint = auth.endpoint_for("network", settings.interface, settings.region_name)

        log.debug("using neutron endpoint", endpoint=endpoint)
        return cls(endpoint, token, timeout=settings.timeout, session=session)

    # ── HTTP plumbing ────────────────────────────────────────────────────────

    def _request(self, method: str, url: str, **kwargs) -> Dict[str, Any]:
        if not url.startswith("http"):
            url = f"{self.endpoint}/{url.lstrip('/')}"
        try:
            resp = self._session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise StoreError(f"{method} {url} failed: {e}")

        if resp.status_code >= 400:
            raise StoreError(
                f"{method} {url} returned {resp.status_code}: {_error_message(resp)}",
                status_code=resp.status_code,
            )
        if resp.status_code == 204 or not resp.content:
            return {}
        try:
            body = resp.json()
        except ValueError:
            raise StoreError(f"{method} {url} returned invalid JSON", status_code=resp.status_code)
        if not isinstance(body, dict):
            raise StoreError(f"{method} {url} returned unexpected body", status_code=resp.status_code)
        return body

    def _request_resource(self, method: str, url: str, key: str, **kwargs) -> Dict[str, Any]:
        """Perform a request and return the single resource wrapped under ``key``."""
        body = self._request(method, url, **kwargs)
        resource = body.get(key)
        if not isinstance(resource, dict) or "id" not in resource:
            raise StoreError(f"{method} {url} response has no '{key}' object")
        return resource

    def _list(self, path: str, key: str, params: Optional[Dict[str, str]] = None) -> List[Dict[str, Any]]:
        """Collect every page of a collection."""
        items: List[Dict[str, Any]] = []
        url: Optional[str] = path
        while url:
            body = self._request("GET", url, params=params)
            items.extend(body.get(key, []))
            # Next links already carry the query string.
            params = None
            url = next(
                (link["href"] for link in body.get(f"{key}_links", []) if link.get("rel") == "next"),
                None,
            )
        return items

    # ── ports ────────────────────────────────────────────────────────────────

    def list_ports(self, name: Optional[str] = None) -> List[Port]:
        params = {"name": name} if name is not None else None
        return [_port_from_api(p) for p in self._list("ports", "ports", params)]

    def create_port(self, opts: PortCreateOpts) -> Port:
        fixed_ips = []
        for ip in opts.fixed_ips:
            entry = {"subnet_id": ip.subnet_id}
            if ip.ip_address:
                entry["ip_address"] = ip.ip_address
            fixed_ips.append(entry)

        body = {"port": {"name": opts.name, "network_id": opts.network_id, "fixed_ips": fixed_ips}}
        return _port_from_api(self._request_resource("POST", "ports", "port", json=body))

    def delete_port(self, port_id: str) -> None:
        self._request("DELETE", f"ports/{port_id}")

    # ── floating IPs ─────────────────────────────────────────────────────────

    def list_floating_ips(self) -> List[FloatingIP]:
        return [_floating_ip_from_api(f) for f in self._list("floatingips", "floatingips")]

    def create_floating_ip(self, opts: FloatingIPCreateOpts) -> FloatingIP:
        fip: Dict[str, Any] = {"floating_network_id": opts.floating_network_id}
        if opts.floating_ip_address:
            fip["floating_ip_address"] = opts.floating_ip_address
        return _floating_ip_from_api(
            self._request_resource("POST", "floatingips", "floatingip", json={"floatingip": fip})
        )

    def update_floating_ip(self, floating_ip_id: str, port_id: Optional[str]) -> FloatingIP:
        body = self._request_resource(
            "PUT", f"floatingips/{floating_ip_id}", "floatingip",
            json={"floatingip": {"port_id": port_id}},
        )
        return _floating_ip_from_api(body)
