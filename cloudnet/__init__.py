"""
cloudnet: resolve and provision the VPC, subnet and security group a
workload is deployed into.
"""

from .config import CloudConfig, load_config
from .deploy import NetworkSubstrate, provision_network_substrate
from .errors import (
    CloudNetError,
    ConfigurationError,
    ErrorKind,
    NetworkMismatchError,
    NotFoundError,
    PartialProvisioningError,
    ProviderError,
)
from .models import FirewallRule, Network, SecurityGroup, Subnet

__all__ = [
    'CloudConfig',
    'load_config',
    'NetworkSubstrate',
    'provision_network_substrate',
    'CloudNetError',
    'ConfigurationError',
    'ErrorKind',
    'NetworkMismatchError',
    'NotFoundError',
    'PartialProvisioningError',
    'ProviderError',
    'FirewallRule',
    'Network',
    'SecurityGroup',
    'Subnet',
]
