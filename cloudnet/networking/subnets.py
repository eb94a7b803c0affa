import logging
from typing import Dict, Optional

from ..errors import ErrorKind, NotFoundError, ProviderError, provider_call
from ..models import Subnet
from ..utils.selection import pick_default
from ..utils.tags import build_aws_tags

logger = logging.getLogger(__name__)

def resolve_subnet(ec2, network_id: str, name: str = "") -> Subnet:
    """
    Resolve a subnet of the given VPC by Name tag or ID.

    Args:
        ec2: boto3 EC2 client
        network_id: ID of the VPC the subnet must belong to
        name: Name tag or subnet ID; empty means any subnet of the VPC

    Returns:
        Subnet: The default-for-AZ match when a name was given, otherwise the
        first match in provider order

    Raises:
        NotFoundError: If no subnet matches
        ProviderError: If a describe call fails
    """
    filters = [{"Name": "vpc-id", "Values": [network_id]}]

    if name:
        logger.debug("getting subnets of %s filtered by name %s", network_id, name)
        with provider_call("describe subnets"):
            subnets = ec2.describe_subnets(
                Filters=filters + [{"Name": "tag:Name", "Values": [name]}]
            ).get("Subnets", [])

        if not subnets:
            logger.debug("getting subnets of %s filtered by id %s", network_id, name)
            try:
                with provider_call(f"describe subnet '{name}'"):
                    subnets = ec2.describe_subnets(
                        SubnetIds=[name], Filters=filters
                    ).get("Subnets", [])
            except ProviderError as e:
                # Unknown or malformed IDs mean the name matched nothing
                if e.kind not in (ErrorKind.NOT_FOUND, ErrorKind.INVALID_PARAMETER):
                    raise
                raise NotFoundError(
                    f"no subnets with name '{name}' found in vpc '{network_id}' "
                    "to associate security group with"
                ) from e
    else:
        with provider_call("describe subnets"):
            subnets = ec2.describe_subnets(Filters=filters).get("Subnets", [])

    if not subnets and name:
        raise NotFoundError(
            f"no subnets with name '{name}' found in vpc '{network_id}' "
            "to associate security group with"
        )
    elif not subnets:
        raise NotFoundError(
            f"no subnets found in vpc '{network_id}' to associate security group with"
        )

    candidates = [Subnet.from_api(s) for s in subnets]
    if name:
        return pick_default(candidates, lambda s: s.default_for_az)
    return candidates[0]

def create_subnet(
    ec2,
    network_id: str,
    cidr_block: str,
    name: str = "",
    tags: Optional[Dict[str, str]] = None,
) -> Subnet:
    """
    Create a subnet in the specified VPC.

    Args:
        ec2: boto3 EC2 client
        network_id: ID of the VPC
        cidr_block: CIDR block for the subnet
        name: Name tag of the subnet
        tags: Optional dictionary of extra tags

    Returns:
        Subnet: The created subnet
    """
    with provider_call(f"create subnet in vpc '{network_id}'"):
        response = ec2.create_subnet(
            VpcId=network_id,
            CidrBlock=cidr_block,
            TagSpecifications=[
                {"ResourceType": "subnet", "Tags": build_aws_tags(tags, name)},
            ],
        )

    subnet = Subnet.from_api(response["Subnet"])
    logger.info("Created subnet %s in VPC %s.", subnet.id, network_id)
    return subnet
