import logging
import time
from typing import Dict, Iterable, List, Optional, Tuple, Union

from ..errors import (
    ErrorKind,
    NetworkMismatchError,
    NotFoundError,
    ConfigurationError,
    ProviderError,
    provider_call,
)
from ..models import FirewallRule, Network, SecurityGroup, OPEN_TO_ALL
from ..utils.tags import build_aws_tags

logger = logging.getLogger(__name__)

PortSpec = Union[str, int]

def _parse_port(part: str, spec: str) -> int:
    part = part.strip()
    if not (part.isascii() and part.isdigit()):
        raise ConfigurationError(f"invalid port '{spec}': '{part}' is not a non-negative integer")
    return int(part)

def parse_port_spec(port: PortSpec) -> Tuple[int, int]:
    """
    Parse a port spec such as "80" or "8000-8100".

    Ordering of the two halves is not checked.

    Args:
        port: Single port or hyphenated range

    Returns:
        Tuple[int, int]: (from_port, to_port)

    Raises:
        ConfigurationError: If the spec is malformed
    """
    spec = str(port).strip()
    if "-" not in spec:
        value = _parse_port(spec, spec)
        return value, value

    parts = spec.split("-")
    if len(parts) != 2:
        raise ConfigurationError(f"invalid port range '{spec}'")
    return _parse_port(parts[0], spec), _parse_port(parts[1], spec)

def build_firewall_rule(protocol: str, port: PortSpec) -> FirewallRule:
    """
    Build an ingress rule open to all sources for one port spec.

    Args:
        protocol: "tcp" or "udp"
        port: Single port or hyphenated range

    Returns:
        FirewallRule: The rule

    Raises:
        ConfigurationError: If the port spec is malformed
    """
    from_port, to_port = parse_port_spec(port)
    return FirewallRule(protocol, from_port, to_port, cidr_blocks=[OPEN_TO_ALL])

def build_ingress_rules(
    tcp_ports: Iterable[PortSpec] = (),
    udp_ports: Iterable[PortSpec] = (),
) -> List[FirewallRule]:
    """Build TCP rules followed by UDP rules, in configuration order."""
    rules = [build_firewall_rule("tcp", port) for port in tcp_ports]
    rules.extend(build_firewall_rule("udp", port) for port in udp_ports)
    return rules

def resolve_security_group(ec2, name: str, network: Network) -> SecurityGroup:
    """
    Resolve a security group by name or ID and check it belongs to the network.

    Args:
        ec2: boto3 EC2 client
        name: Group name or group ID
        network: The VPC the group must be bound to

    Returns:
        SecurityGroup: The resolved group

    Raises:
        NetworkMismatchError: If every matching group belongs to another VPC
        NotFoundError: If no group matches the name or ID
        ProviderError: If a describe call fails
    """
    logger.debug("getting security groups filtered by name %s", name)
    with provider_call("describe security groups"):
        groups = ec2.describe_security_groups(
            Filters=[{"Name": "group-name", "Values": [name]}]
        ).get("SecurityGroups", [])

    if not groups:
        logger.debug("getting security groups filtered by id %s", name)
        try:
            with provider_call(f"get security group with id '{name}'"):
                groups = ec2.describe_security_groups(GroupIds=[name]).get("SecurityGroups", [])
        except ProviderError as e:
            # Unknown or malformed IDs mean the name matched nothing
            if e.kind not in (ErrorKind.NOT_FOUND, ErrorKind.INVALID_PARAMETER):
                raise
            raise NotFoundError(f"security group '{name}' not found") from e

    if not groups:
        raise NotFoundError(f"security group '{name}' not found")

    # Group names are only unique within a VPC
    owned = [g for g in groups if g.get("VpcId") == network.id]
    if not owned:
        raise NetworkMismatchError(name, network.id, groups[0].get("VpcId"))

    return SecurityGroup.from_api(owned[0])

def create_security_group(
    ec2,
    image_name: str,
    network_id: str,
    tcp_ports: Iterable[PortSpec] = (),
    udp_ports: Iterable[PortSpec] = (),
    tags: Optional[Dict[str, str]] = None,
) -> SecurityGroup:
    """
    Create a uniquely named security group for a workload and open its ports.

    Orphaned groups are left behind when a later step fails; the
    time-suffixed name keeps them from colliding with new attempts.

    Args:
        ec2: boto3 EC2 client
        image_name: Workload name the group is created for
        network_id: ID of the VPC
        tcp_ports: TCP port specs to open
        udp_ports: UDP port specs to open
        tags: Optional dictionary of extra tags

    Returns:
        SecurityGroup: The created group as described after creation

    Raises:
        ConfigurationError: If a port spec is malformed (before anything is created)
        ProviderError: If any remote call fails
    """
    rules = build_ingress_rules(tcp_ports, udp_ports)
    sg_name = f"{image_name}{time.time_ns()}"

    with provider_call(
        f"create security group '{image_name}'",
        messages={
            ErrorKind.VPC_NOT_FOUND: f"Unable to find VPC with ID '{network_id}'.",
            ErrorKind.DUPLICATE: f"Security group '{image_name}' already exists.",
        },
    ):
        response = ec2.create_security_group(
            GroupName=sg_name,
            Description=f"security group for {image_name}",
            VpcId=network_id,
            TagSpecifications=[
                {"ResourceType": "security-group", "Tags": build_aws_tags(tags, sg_name)},
            ],
        )
    group_id = response["GroupId"]
    logger.info("Created security group %s with VPC %s.", group_id, network_id)

    if rules:
        with provider_call(f"set security group '{image_name}' ingress"):
            ec2.authorize_security_group_ingress(
                GroupId=group_id,
                IpPermissions=[rule.to_api() for rule in rules],
            )

    with provider_call(f"describe security group '{group_id}'"):
        groups = ec2.describe_security_groups(GroupIds=[group_id]).get("SecurityGroups", [])
    if not groups:
        raise ProviderError(
            f"failed creating security group '{sg_name}'",
            operation="describe security group",
        )

    return SecurityGroup.from_api(groups[0])
