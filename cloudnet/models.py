"""
Resource handles returned by the resolvers and provisioners.

Each handle is built from an EC2 API response dictionary and keeps that
dictionary on ``raw``.
"""

from typing import Any, Dict, List, Optional

OPEN_TO_ALL = "0.0.0.0/0"


def _name_tag(tags: Optional[List[Dict[str, str]]]) -> Optional[str]:
    for tag in tags or []:
        if tag.get("Key") == "Name":
            return tag.get("Value")
    return None


class FirewallRule:
    """One allow-ingress entry: protocol, port range and source ranges."""
    def __init__(
        self,
        protocol: str,
        from_port: int,
        to_port: int,
        cidr_blocks: Optional[List[str]] = None,
    ):
        self.protocol = protocol
        self.from_port = from_port
        self.to_port = to_port
        self.cidr_blocks = cidr_blocks if cidr_blocks is not None else [OPEN_TO_ALL]

    def to_api(self) -> Dict[str, Any]:
        """Render the rule as an EC2 IpPermissions entry."""
        return {
            "IpProtocol": self.protocol,
            "FromPort": self.from_port,
            "ToPort": self.to_port,
            "IpRanges": [{"CidrIp": cidr} for cidr in self.cidr_blocks],
        }

    @classmethod
    def from_api(cls, permission: Dict[str, Any]) -> "FirewallRule":
        return cls(
            protocol=permission.get("IpProtocol"),
            from_port=permission.get("FromPort"),
            to_port=permission.get("ToPort"),
            cidr_blocks=[r["CidrIp"] for r in permission.get("IpRanges", []) if "CidrIp" in r],
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, FirewallRule):
            return NotImplemented
        return self.to_api() == other.to_api()

    def __repr__(self) -> str:
        if self.from_port == self.to_port:
            ports = str(self.from_port)
        else:
            ports = f"{self.from_port}-{self.to_port}"
        return f"FirewallRule({self.protocol}/{ports} from {', '.join(self.cidr_blocks)})"


class Network:
    """A VPC."""
    def __init__(
        self,
        id: str,
        cidr_block: str,
        name: Optional[str] = None,
        is_default: bool = False,
        ipv6_cidr_blocks: Optional[List[str]] = None,
        raw: Optional[Dict[str, Any]] = None,
    ):
        self.id = id
        self.cidr_block = cidr_block
        self.name = name
        self.is_default = is_default
        self.ipv6_cidr_blocks = ipv6_cidr_blocks or []
        self.raw = raw or {}

    @property
    def ipv6_enabled(self) -> bool:
        return bool(self.ipv6_cidr_blocks)

    @classmethod
    def from_api(cls, vpc: Dict[str, Any]) -> "Network":
        ipv6_blocks = [
            assoc["Ipv6CidrBlock"]
            for assoc in vpc.get("Ipv6CidrBlockAssociationSet", [])
            if assoc.get("Ipv6CidrBlock")
        ]
        return cls(
            id=vpc["VpcId"],
            cidr_block=vpc.get("CidrBlock"),
            name=_name_tag(vpc.get("Tags")),
            is_default=bool(vpc.get("IsDefault", False)),
            ipv6_cidr_blocks=ipv6_blocks,
            raw=vpc,
        )

    def __repr__(self) -> str:
        return f"Network(id={self.id!r}, name={self.name!r}, cidr_block={self.cidr_block!r})"


class Subnet:
    """An address-range partition of a VPC."""
    def __init__(
        self,
        id: str,
        network_id: str,
        cidr_block: str,
        default_for_az: bool = False,
        availability_zone: Optional[str] = None,
        name: Optional[str] = None,
        raw: Optional[Dict[str, Any]] = None,
    ):
        self.id = id
        self.network_id = network_id
        self.cidr_block = cidr_block
        self.default_for_az = default_for_az
        self.availability_zone = availability_zone
        self.name = name
        self.raw = raw or {}

    @classmethod
    def from_api(cls, subnet: Dict[str, Any]) -> "Subnet":
        return cls(
            id=subnet["SubnetId"],
            network_id=subnet.get("VpcId"),
            cidr_block=subnet.get("CidrBlock"),
            default_for_az=bool(subnet.get("DefaultForAz", False)),
            availability_zone=subnet.get("AvailabilityZone"),
            name=_name_tag(subnet.get("Tags")),
            raw=subnet,
        )

    def __repr__(self) -> str:
        return f"Subnet(id={self.id!r}, network_id={self.network_id!r}, cidr_block={self.cidr_block!r})"


class SecurityGroup:
    """A stateful firewall attached to a VPC."""
    def __init__(
        self,
        id: str,
        name: str,
        network_id: str,
        description: Optional[str] = None,
        ingress_rules: Optional[List[FirewallRule]] = None,
        raw: Optional[Dict[str, Any]] = None,
    ):
        self.id = id
        self.name = name
        self.network_id = network_id
        self.description = description
        self.ingress_rules = ingress_rules or []
        self.raw = raw or {}

    @classmethod
    def from_api(cls, group: Dict[str, Any]) -> "SecurityGroup":
        return cls(
            id=group["GroupId"],
            name=group.get("GroupName"),
            network_id=group.get("VpcId"),
            description=group.get("Description"),
            ingress_rules=[FirewallRule.from_api(p) for p in group.get("IpPermissions", [])],
            raw=group,
        )

    def __repr__(self) -> str:
        return f"SecurityGroup(id={self.id!r}, name={self.name!r}, network_id={self.network_id!r})"
