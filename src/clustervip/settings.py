"""
Cloud connection settings.

Settings are read from a YAML file (``~/.config/clustervip/cloud.yaml`` unless
``CLUSTERVIP_CONFIG`` points elsewhere) and every field can be overridden with
a ``CLUSTERVIP_<FIELD>`` environment variable.
"""

import os
from pathlib import Path
from typing import Mapping, Optional

import structlog
import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from clustervip.errors import ConfigError

log = structlog.get_logger(__name__)

ENV_PREFIX = "CLUSTERVIP_"
VALID_INTERFACES = {"public", "internal", "admin"}


def default_config_path() -> Path:
    return Path(
        os.getenv(f"{ENV_PREFIX}CONFIG", str(Path.home() / ".config/clustervip/cloud.yaml"))
    )


class CloudSettings(BaseModel):
    """Keystone credentials, Neutron endpoint and reconciliation options."""

    auth_url: str = Field(default="", description="Keystone v3 URL, e.g. https://keystone:5000/v3")
    username: str = ""
    password: str = ""
    project_name: str = ""
    user_domain_name: str = "Default"
    project_domain_name: str = "Default"
    region_name: str = ""
    interface: str = Field(default="public", description="Catalog endpoint interface")
    token: str = Field(default="", description="Pre-issued token, skips password auth")
    network_endpoint: str = Field(default="", description="Neutron URL, skips catalog lookup")
    timeout: float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")
    network_prefix: str = Field(default="openstack", description="Prefix of the VIP port name")
    strict_port_lookup: bool = Field(
        default=False, description="Fail instead of reusing the first of several same-named ports"
    )

    @field_validator("interface")
    @classmethod
    def interface_must_be_valid(cls, v: str) -> str:
        if v not in VALID_INTERFACES:
            raise ValueError(f"interface must be one of: {sorted(VALID_INTERFACES)}")
        return v

    @field_validator("network_prefix")
    @classmethod
    def prefix_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("network_prefix cannot be empty")
        return v.strip()

    def has_credentials(self) -> bool:
        return bool(self.token or (self.username and self.password))

    @classmethod
    def load(
        cls,
        path: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "CloudSettings":
        """Load settings from ``path`` (if it exists) and apply environment overrides."""
        path = path or default_config_path()
        environ = os.environ if environ is None else environ

        data = {}
        if path.exists():
            try:
                raw = yaml.safe_load(path.read_text())
            except yaml.YAMLError as e:
                raise ConfigError(f"Failed to parse settings file {path}: {e}")
            if raw is not None and not isinstance(raw, dict):
                raise ConfigError(f"Settings file must be a YAML mapping: {path}")
            data.update(raw or {})
        else:
            log.debug("settings file not found, using environment only", path=str(path))

        for name in cls.model_fields:
            key = f"{ENV_PREFIX}{name.upper()}"
            if key in environ:
                data[name] = environ[key]

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(str(e))
