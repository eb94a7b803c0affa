"""
Networking components: VPC and subnet resolution and provisioning.
"""

from .vpc import resolve_network, get_network, create_network
from .subnets import resolve_subnet, create_subnet

__all__ = [
    'resolve_network',
    'get_network',
    'create_network',
    'resolve_subnet',
    'create_subnet',
]
