import logging
import re
from typing import Dict, Optional, Tuple

from ..errors import (
    ConfigurationError,
    ErrorKind,
    NotFoundError,
    PartialProvisioningError,
    ProviderError,
    provider_call,
)
from ..models import Network, Subnet
from ..utils.cidr import allocate_new_cidr_block
from ..utils.selection import pick_default
from ..utils.tags import build_aws_tags
from .subnets import create_subnet

logger = logging.getLogger(__name__)

NETWORK_ID_PATTERN = re.compile(r"^vpc-.*")

def resolve_network(ec2, name: str = "") -> Optional[Network]:
    """
    Resolve a VPC by Name tag or ID, or pick the account's default VPC.

    A non-empty name that matches no Name tag and does not look like a VPC
    ID resolves to None: the caller is expected to create the network.

    Args:
        ec2: boto3 EC2 client
        name: Name tag or VPC ID to look for; empty means no preference

    Returns:
        Optional[Network]: The resolved network, or None when it has to be created

    Raises:
        NotFoundError: If no VPC exists (empty name)
        ProviderError: If a describe call fails or an ID lookup returns nothing
    """
    if name:
        logger.debug("getting vpcs filtered by name %s", name)
        with provider_call("describe VPCs"):
            vpcs = ec2.describe_vpcs(
                Filters=[{"Name": "tag:Name", "Values": [name]}]
            ).get("Vpcs", [])

        if not vpcs:
            if not NETWORK_ID_PATTERN.match(name):
                logger.debug("no vpcs with name %s found", name)
                return None

            logger.debug("getting vpcs filtered by id %s", name)
            with provider_call(f"describe VPC '{name}'"):
                vpcs = ec2.describe_vpcs(VpcIds=[name]).get("Vpcs", [])
            if not vpcs:
                raise ProviderError(
                    f"no VPCs found with id '{name}'",
                    kind=ErrorKind.VPC_NOT_FOUND,
                    operation=f"describe VPC '{name}'",
                )

        logger.debug("found %d vpcs that match the criteria %s", len(vpcs), name)
        return Network.from_api(vpcs[0])

    logger.debug("no vpc name specified, getting all vpcs")
    with provider_call("describe VPCs"):
        vpcs = ec2.describe_vpcs().get("Vpcs", [])

    network = pick_default([Network.from_api(v) for v in vpcs], lambda n: n.is_default)
    if network is None:
        raise NotFoundError("no VPCs found")

    logger.debug("picking vpc %s (default: %s)", network.id, network.is_default)
    return network

def get_network(ec2, network_id: str) -> Network:
    """
    Fetch a VPC by ID.

    Args:
        ec2: boto3 EC2 client
        network_id: VPC ID

    Returns:
        Network: The VPC

    Raises:
        NotFoundError: If the describe call returns no VPC
        ProviderError: If the describe call fails
    """
    with provider_call(f"describe VPC '{network_id}'"):
        vpcs = ec2.describe_vpcs(VpcIds=[network_id]).get("Vpcs", [])
    if not vpcs:
        raise NotFoundError(f"no VPCs found with id '{network_id}'")
    return Network.from_api(vpcs[0])

def create_network(
    ec2,
    name: str,
    subnet_name: str = "",
    enable_ipv6: bool = False,
    tags: Optional[Dict[str, str]] = None,
) -> Tuple[Network, Subnet]:
    """
    Create a VPC on a free CIDR block together with one subnet spanning it.

    Args:
        ec2: boto3 EC2 client
        name: Name tag of the new VPC (required)
        subnet_name: Name tag of the subnet; defaults to the VPC name
        enable_ipv6: Whether to request an Amazon-provided IPv6 block
        tags: Optional dictionary of extra tags for both resources

    Returns:
        Tuple[Network, Subnet]: The created VPC and subnet

    Raises:
        ConfigurationError: If name is empty
        ProviderError: If listing or creating the VPC fails
        PartialProvisioningError: If the VPC was created but the subnet was not;
            the created network is available on the exception
    """
    if not name:
        raise ConfigurationError("specify vpc name")

    with provider_call("describe VPCs"):
        vpcs = ec2.describe_vpcs().get("Vpcs", [])
    cidr_block = allocate_new_cidr_block([v.get("CidrBlock") for v in vpcs])

    create_args = {
        "CidrBlock": cidr_block,
        "TagSpecifications": [
            {"ResourceType": "vpc", "Tags": build_aws_tags(tags, name)},
        ],
    }
    if enable_ipv6:
        create_args["AmazonProvidedIpv6CidrBlock"] = True

    with provider_call(f"create VPC '{name}'"):
        response = ec2.create_vpc(**create_args)
    network_id = response["Vpc"]["VpcId"]
    logger.info("Created VPC %s with CIDR block %s.", network_id, cidr_block)

    # Resolved by the returned ID; several VPCs may share the same Name tag.
    network = get_network(ec2, network_id)

    try:
        subnet = create_subnet(
            ec2,
            network_id=network.id,
            cidr_block=network.cidr_block,
            name=subnet_name or name,
            tags=tags,
        )
    except ProviderError as e:
        raise PartialProvisioningError(
            f"created VPC {network.id} but failed to create its subnet: {e}",
            network=network,
            cause=e,
        ) from e

    return network, subnet
