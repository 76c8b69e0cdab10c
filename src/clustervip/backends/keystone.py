"""Keystone v3 token issuing and service catalog lookup."""

from dataclasses import dataclass, field
from typing import Any, Dict, List

import requests
import structlog

from clustervip.errors import ConfigError, StoreError

log = structlog.get_logger(__name__)


@dataclass
class KeystoneToken:
    token: str
    catalog: List[Dict[str, Any]] = field(default_factory=list)

    def endpoint_for(self, service_type: str, interface: str = "public", region: str = "") -> str:
        """Return the catalog URL of ``service_type`` for the given interface and region."""
        for service in self.catalog:
            if service.get("type") != service_type:
                continue
            for endpoint in service.get("endpoints", []):
                if endpoint.get("interface") != interface:
                    continue
                if region and region not in (endpoint.get("region"), endpoint.get("region_id")):
                    continue
                return endpoint["url"]
        where = f" in region '{region}'" if region else ""
        raise ConfigError(f"No {interface} '{service_type}' endpoint in service catalog{where}")


def _password_payload(settings) -> Dict[str, Any]:
    return {
        "auth": {
            "identity": {
                "methods": ["password"],
                "password": {
                    "user": {
                        "name": settings.username,
                        "password": settings.password,
                        "domain": {"name": settings.user_domain_name},
                    }
                },
            },
            "scope": {
                "project": {
                    "name": settings.project_name,
                    "domain": {"name": settings.project_domain_name},
                }
            },
        }
    }


def authenticate(session: requests.Session, settings) -> KeystoneToken:
    """
    Obtain a token and its service catalog.

    With ``settings.token`` set the token is validated instead of issuing a
    new one, which also returns its catalog.
    """
    if not settings.auth_url:
        raise ConfigError("auth_url is required to authenticate against Keystone")
    url = f"{settings.auth_url.rstrip('/')}/auth/tokens"

    try:
        if settings.token:
            resp = session.get(
                url,
                headers={"X-Auth-Token": settings.token, "X-Subject-Token": settings.token},
                timeout=settings.timeout,
            )
        else:
            log.debug("requesting keystone token", auth_url=settings.auth_url,
                      username=settings.username, project=settings.project_name)
            resp = session.post(url, json=_password_payload(settings), timeout=settings.timeout)
    except requests.RequestException as e:
        raise StoreError(f"Failed to reach Keystone at {settings.auth_url}: {e}")

    if resp.status_code >= 400:
        raise StoreError(
            f"Keystone authentication failed ({resp.status_code}): {resp.text.strip()}",
            status_code=resp.status_code,
        )

    token = resp.headers.get("X-Subject-Token") or settings.token
    if not token:
        raise StoreError("Keystone returned no token", status_code=resp.status_code)
    try:
        body = resp.json()
    except ValueError:
        raise StoreError("Keystone returned invalid JSON", status_code=resp.status_code)
    if not isinstance(body, dict):
        raise StoreError("Keystone returned unexpected body", status_code=resp.status_code)
    catalog = body.get("token", {}).get("catalog", [])
    return KeystoneToken(token=token, catalog=catalog)
