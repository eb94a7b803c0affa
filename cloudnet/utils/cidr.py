import ipaddress
import logging
from typing import Iterable, List, Union

from ..errors import ErrorKind, ProviderError

logger = logging.getLogger(__name__)

ADDRESS_POOL = ipaddress.ip_network("10.0.0.0/8")

IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]

def _parse_networks(cidr_blocks: Iterable[str]) -> List[IPNetwork]:
    networks = []
    for block in cidr_blocks:
        if not block:
            continue
        try:
            networks.append(ipaddress.ip_network(block, strict=False))
        except ValueError:
            logger.warning("ignoring unparsable CIDR block %r", block)
    return networks

def allocate_new_cidr_block(existing: Iterable[str], prefix_length: int = 16) -> str:
    """
    Pick a block from 10.0.0.0/8 that does not overlap any existing block.

    Args:
        existing: CIDR blocks already in use (e.g. every VPC's CidrBlock)
        prefix_length: Prefix length of the allocated block (9 to 28)

    Returns:
        str: The lowest free candidate

    Raises:
        ProviderError: If every candidate overlaps an existing block
    """
    if not 8 < prefix_length <= 28:
        raise ValueError(f"prefix length must be between 9 and 28, got {prefix_length}")

    used = [n for n in _parse_networks(existing) if n.version == 4]
    for candidate in ADDRESS_POOL.subnets(new_prefix=prefix_length):
        if not any(candidate.overlaps(n) for n in used):
            return str(candidate)

    raise ProviderError(
        f"no free /{prefix_length} CIDR block left in {ADDRESS_POOL}",
        kind=ErrorKind.LIMIT_EXCEEDED,
        operation="allocate CIDR block",
    )
