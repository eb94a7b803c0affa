import logging
from typing import Optional

import boto3

from .errors import provider_call

logger = logging.getLogger(__name__)

def get_ec2_client(region: Optional[str] = None, profile: Optional[str] = None):
    """
    Create a boto3 EC2 client for one account and region.

    Args:
        region: AWS region; falls back to the profile or environment default
        profile: Named AWS profile; falls back to the default credential chain

    Returns:
        The EC2 client

    Raises:
        ProviderError: If the profile does not exist or no region can be determined
    """
    with provider_call("create EC2 client"):
        session = boto3.Session(profile_name=profile, region_name=region)
        client = session.client("ec2")
    logger.debug(
        "created EC2 client for region %s (profile: %s)",
        client.meta.region_name,
        profile or "default",
    )
    return client
