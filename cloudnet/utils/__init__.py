"""
Utility functions for network provisioning.
"""

from .tags import build_aws_tags
from .cidr import allocate_new_cidr_block
from .selection import pick_default

__all__ = [
    'build_aws_tags',
    'allocate_new_cidr_block',
    'pick_default',
]
