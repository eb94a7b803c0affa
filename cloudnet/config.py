"""
Provisioning configuration.

A CloudConfig can be built from keyword arguments, from a dictionary in
either snake_case form or the nested deployment-config form:

    {
        "CloudConfig": {"VPC": "...", "Subnet": "...", "SecurityGroup": "...",
                        "EnableIPv6": false, "Zone": "us-east-1", "Tags": {...}},
        "RunConfig": {"Ports": ["80", "8000-8100"], "UDPPorts": ["53"]}
    }

or loaded from a JSON file with load_config(). Port specs are validated
when the config is created, so a bad port fails before any remote call.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Sequence, Union

from .errors import ConfigurationError
from .ec2.security_groups import parse_port_spec

logger = logging.getLogger(__name__)

class CloudConfig:
    """Desired network substrate for one deployment."""
    def __init__(
        self,
        network_name: str = "",
        subnet_name: str = "",
        security_group_name: str = "",
        tcp_ports: Optional[Sequence[Union[str, int]]] = None,
        udp_ports: Optional[Sequence[Union[str, int]]] = None,
        enable_ipv6: bool = False,
        region: Optional[str] = None,
        profile: Optional[str] = None,
        tags: Optional[Union[Dict[str, str], List[Dict[str, str]]]] = None,
    ):
        self.network_name = network_name or ""
        self.subnet_name = subnet_name or ""
        self.security_group_name = security_group_name or ""
        self.tcp_ports = _validate_ports(tcp_ports, "tcp")
        self.udp_ports = _validate_ports(udp_ports, "udp")
        self.enable_ipv6 = bool(enable_ipv6)
        self.region = region
        self.profile = profile
        self.tags = _normalize_tags(tags)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CloudConfig":
        """
        Build a config from a dictionary.

        Args:
            data: snake_case keys, or the nested CloudConfig/RunConfig layout

        Returns:
            CloudConfig: The validated config

        Raises:
            ConfigurationError: If a port spec is malformed or a section has the wrong type
        """
        if not isinstance(data, dict):
            raise ConfigurationError("configuration must be a JSON object")

        if "CloudConfig" not in data and "RunConfig" not in data:
            known = {
                "network_name", "subnet_name", "security_group_name", "tcp_ports",
                "udp_ports", "enable_ipv6", "region", "profile", "tags",
            }
            unknown = set(data) - known
            if unknown:
                logger.warning("ignoring unknown configuration keys: %s", ", ".join(sorted(unknown)))
            return cls(**{k: v for k, v in data.items() if k in known})

        cloud = data.get("CloudConfig") or {}
        run = data.get("RunConfig") or {}
        if not isinstance(cloud, dict) or not isinstance(run, dict):
            raise ConfigurationError("CloudConfig and RunConfig must be JSON objects")

        return cls(
            network_name=cloud.get("VPC", ""),
            subnet_name=cloud.get("Subnet", ""),
            security_group_name=cloud.get("SecurityGroup", ""),
            tcp_ports=run.get("Ports"),
            udp_ports=run.get("UDPPorts"),
            enable_ipv6=cloud.get("EnableIPv6", False),
            region=cloud.get("Region") or cloud.get("Zone"),
            profile=cloud.get("Profile"),
            tags=cloud.get("Tags"),
        )

    def __repr__(self) -> str:
        return (
            f"CloudConfig(network_name={self.network_name!r}, subnet_name={self.subnet_name!r}, "
            f"security_group_name={self.security_group_name!r}, tcp_ports={self.tcp_ports!r}, "
            f"udp_ports={self.udp_ports!r}, enable_ipv6={self.enable_ipv6!r}, region={self.region!r})"
        )

def _validate_ports(ports: Optional[Sequence[Union[str, int]]], protocol: str) -> List[str]:
    if ports is None:
        return []
    if isinstance(ports, (str, int)):
        ports = [ports]

    validated = []
    for port in ports:
        try:
            parse_port_spec(port)
        except ConfigurationError as e:
            raise ConfigurationError(f"invalid {protocol} port configuration: {e}") from e
        validated.append(str(port).strip())
    return validated

def _normalize_tags(tags: Any) -> Dict[str, str]:
    """
    Accept tags as a mapping or as a list of key/value entries.

    Both {"key": ..., "value": ...} and the EC2 {"Key": ..., "Value": ...}
    spelling are accepted in list form.
    """
    if tags is None:
        return {}
    if isinstance(tags, dict):
        return {str(k): str(v) for k, v in tags.items()}
    if not isinstance(tags, list):
        raise ConfigurationError(f"tags must be an object or a list of key/value entries, got {tags!r}")

    normalized = {}
    for entry in tags:
        if not isinstance(entry, dict):
            raise ConfigurationError(f"invalid tag entry {entry!r}")
        key = entry.get("Key", entry.get("key"))
        if not key:
            raise ConfigurationError(f"tag entry {entry!r} has no key")
        normalized[str(key)] = str(entry.get("Value", entry.get("value", "")))
    return normalized

def load_config(path: str) -> CloudConfig:
    """
    Load a CloudConfig from a JSON file.

    Args:
        path: Path to the JSON configuration file

    Returns:
        CloudConfig: The validated config

    Raises:
        ConfigurationError: If the file cannot be read, is not valid JSON, or is invalid
    """
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigurationError(f"unable to read configuration file '{path}': {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"configuration file '{path}' is not valid JSON: {e}") from e

    return CloudConfig.from_dict(data)
