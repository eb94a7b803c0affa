#!/usr/bin/env python3
"""
Network Provisioning Script

This script resolves the VPC, subnet and security group described by a
configuration file, creating whatever is missing, and prints their IDs.
"""

import argparse
import json
import logging
import os
import sys
from typing import Any, Dict, List, Optional

# Add the parent directory to the path so we can import the cloudnet package
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from cloudnet.client import get_ec2_client
from cloudnet.config import load_config
from cloudnet.deploy import provision_network_substrate
from cloudnet.errors import CloudNetError
from cloudnet.logger import configure_logging
from cloudnet.networking.subnets import resolve_subnet
from cloudnet.networking.vpc import resolve_network
from cloudnet.ec2.security_groups import resolve_security_group

def parse_args(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Resolve or create the network substrate for a workload"
    )

    parser.add_argument("--config", required=True, help="Path to the JSON configuration file")
    parser.add_argument("--region", help="AWS region (overrides the configuration file)")
    parser.add_argument("--profile", help="AWS profile (overrides the configuration file)")
    parser.add_argument("--json", action="store_true", help="Output in JSON format")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    provision_parser = subparsers.add_parser("provision", help="Resolve or create VPC, subnet and security group")
    provision_parser.add_argument("--image-name", required=True, help="Workload name used for a created security group")

    subparsers.add_parser("resolve", help="Resolve existing resources without creating anything")

    return parser.parse_args(argv)

def resolve_only(ec2, config) -> Dict[str, Any]:
    """Resolve the configured resources without creating anything."""
    network = resolve_network(ec2, config.network_name)
    if network is None:
        return {"vpc": None, "subnet": None, "security_group": None}

    subnet = resolve_subnet(ec2, network.id, config.subnet_name)
    security_group = None
    if config.security_group_name:
        security_group = resolve_security_group(ec2, config.security_group_name, network).id

    return {"vpc": network.id, "subnet": subnet.id, "security_group": security_group}

def main(argv: Optional[List[str]] = None) -> int:
    """Main function."""
    args = parse_args(argv)
    configure_logging(logging.DEBUG if args.debug else logging.INFO)

    if not args.command:
        print("Error: a command is required (provision or resolve)")
        return 1

    try:
        config = load_config(args.config)
        ec2 = get_ec2_client(
            region=args.region or config.region,
            profile=args.profile or config.profile,
        )

        if args.command == "provision":
            substrate = provision_network_substrate(ec2, config, args.image_name)
            result = {
                "vpc": substrate.network.id,
                "subnet": substrate.subnet.id,
                "security_group": substrate.security_group.id,
                "created_vpc": substrate.created_network,
                "created_security_group": substrate.created_security_group,
            }
        else:
            result = resolve_only(ec2, config)
    except CloudNetError as e:
        print(f"Error: {e}")
        return 1

    if args.json:
        print(json.dumps(result, indent=2))
    else:
        for key, value in result.items():
            print(f"{key}: {value if value is not None else '-'}")

    return 0

if __name__ == "__main__":
    sys.exit(main())
