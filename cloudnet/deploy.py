"""
Network substrate orchestration.

Resolves or creates, in order, the VPC, the subnet and the security group a
workload is deployed into. Each step needs the previous step's ID, so the
sequence is strictly serial.
"""

import logging
from typing import Optional

from .config import CloudConfig
from .ec2.security_groups import create_security_group, resolve_security_group
from .models import Network, SecurityGroup, Subnet
from .networking.subnets import resolve_subnet
from .networking.vpc import create_network, resolve_network

logger = logging.getLogger(__name__)

class NetworkSubstrate:
    """The resolved VPC, subnet and security group for one deployment."""
    def __init__(self, network: Network, subnet: Subnet, security_group: SecurityGroup,
                 created_network: bool = False, created_security_group: bool = False):
        self.network = network
        self.subnet = subnet
        self.security_group = security_group
        self.created_network = created_network
        self.created_security_group = created_security_group

    def __str__(self) -> str:
        return (
            f"vpc={self.network.id} subnet={self.subnet.id} "
            f"security_group={self.security_group.id}"
        )

def provision_network_substrate(
    ec2,
    config: CloudConfig,
    image_name: str,
) -> NetworkSubstrate:
    """
    Resolve or create the VPC, subnet and security group for a workload.

    The VPC is created when config.network_name names no existing VPC. The
    security group is resolved when config.security_group_name is set and
    created otherwise.

    Args:
        ec2: boto3 EC2 client
        config: Desired network configuration
        image_name: Workload name, used to name a created security group

    Returns:
        NetworkSubstrate: The resolved resources

    Raises:
        CloudNetError: If any step fails
    """
    created_network = False
    network: Optional[Network] = resolve_network(ec2, config.network_name)
    if network is None:
        logger.info("VPC '%s' not found, creating it", config.network_name)
        network, _ = create_network(
            ec2,
            config.network_name,
            subnet_name=config.subnet_name,
            enable_ipv6=config.enable_ipv6,
            tags=config.tags,
        )
        created_network = True

    subnet = resolve_subnet(ec2, network.id, config.subnet_name)

    if config.security_group_name:
        security_group = resolve_security_group(ec2, config.security_group_name, network)
        created_security_group = False
    else:
        security_group = create_security_group(
            ec2,
            image_name,
            network.id,
            tcp_ports=config.tcp_ports,
            udp_ports=config.udp_ports,
            tags=config.tags,
        )
        created_security_group = True

    substrate = NetworkSubstrate(network, subnet, security_group,
                                 created_network=created_network,
                                 created_security_group=created_security_group)
    logger.info("Network substrate ready: %s", substrate)
    return substrate
