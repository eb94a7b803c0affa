"""
EC2 security group components.
"""

from .security_groups import (
    parse_port_spec,
    build_firewall_rule,
    build_ingress_rules,
    resolve_security_group,
    create_security_group,
)

__all__ = [
    'parse_port_spec',
    'build_firewall_rule',
    'build_ingress_rules',
    'resolve_security_group',
    'create_security_group',
]
