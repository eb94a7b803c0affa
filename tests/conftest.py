"""
Shared test fixtures and configuration.
"""

import copy
import itertools
import pytest
import os
import sys
from botocore.exceptions import ClientError

# Add the parent directory to the path so we can import the cloudnet package
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Mock EC2 API
class FakeEC2Client:
    """
    In-memory stand-in for a boto3 EC2 client.

    Records every call in ``calls`` and raises real ClientError objects the
    way EC2 does for missing IDs and duplicates.
    """

    def __init__(self):
        self.vpcs = []
        self.subnets = []
        self.security_groups = []
        self.calls = []
        self._failures = {}
        self._responses = {}
        self._ids = itertools.count(1)

    # Test setup helpers

    def add_vpc(self, cidr_block, name=None, is_default=False, vpc_id=None):
        vpc = {
            "VpcId": vpc_id or self._new_id("vpc"),
            "CidrBlock": cidr_block,
            "IsDefault": is_default,
            "State": "available",
        }
        if name:
            vpc["Tags"] = [{"Key": "Name", "Value": name}]
        self.vpcs.append(vpc)
        return vpc

    def add_subnet(self, vpc_id, cidr_block, name=None, default_for_az=False, subnet_id=None):
        subnet = {
            "SubnetId": subnet_id or self._new_id("subnet"),
            "VpcId": vpc_id,
            "CidrBlock": cidr_block,
            "DefaultForAz": default_for_az,
            "AvailabilityZone": "us-east-1a",
        }
        if name:
            subnet["Tags"] = [{"Key": "Name", "Value": name}]
        self.subnets.append(subnet)
        return subnet

    def add_security_group(self, name, vpc_id, group_id=None):
        group = {
            "GroupId": group_id or self._new_id("sg"),
            "GroupName": name,
            "VpcId": vpc_id,
            "Description": f"security group {name}",
            "IpPermissions": [],
        }
        self.security_groups.append(group)
        return group

    def fail_next(self, method, code, message="simulated failure"):
        """Make the next call to method raise a ClientError with the given code."""
        self._failures.setdefault(method, []).append(
            ClientError({"Error": {"Code": code, "Message": message}}, method)
        )

    def respond_next(self, method, response):
        """Make the next call to method return response verbatim."""
        self._responses.setdefault(method, []).append(response)

    def calls_to(self, method):
        return [kwargs for name, kwargs in self.calls if name == method]

    # EC2 API

    def describe_vpcs(self, **kwargs):
        canned = self._record("describe_vpcs", kwargs)
        if canned is not None:
            return canned
        vpcs = self._select(self.vpcs, "VpcId", kwargs.get("VpcIds"), "InvalidVpcID.NotFound")
        return {"Vpcs": self._filter(vpcs, kwargs.get("Filters"))}

    def describe_subnets(self, **kwargs):
        canned = self._record("describe_subnets", kwargs)
        if canned is not None:
            return canned
        subnets = self._select(self.subnets, "SubnetId", kwargs.get("SubnetIds"), "InvalidSubnetID.NotFound")
        return {"Subnets": self._filter(subnets, kwargs.get("Filters"))}

    def describe_security_groups(self, **kwargs):
        canned = self._record("describe_security_groups", kwargs)
        if canned is not None:
            return canned
        ids = kwargs.get("GroupIds")
        for group_id in ids or []:
            if not group_id.startswith("sg-"):
                raise self._error("InvalidGroupId.Malformed", f"Invalid id: \"{group_id}\"", "DescribeSecurityGroups")
        groups = self._select(self.security_groups, "GroupId", ids, "InvalidGroup.NotFound")
        return {"SecurityGroups": self._filter(groups, kwargs.get("Filters"))}

    def create_vpc(self, **kwargs):
        self._record("create_vpc", kwargs)
        vpc = {
            "VpcId": self._new_id("vpc"),
            "CidrBlock": kwargs["CidrBlock"],
            "IsDefault": False,
            "State": "pending",
            "Tags": self._tags(kwargs, "vpc"),
        }
        if kwargs.get("AmazonProvidedIpv6CidrBlock"):
            vpc["Ipv6CidrBlockAssociationSet"] = [
                {"Ipv6CidrBlock": "2600:1f18:1234:5600::/56", "Ipv6Pool": "Amazon"}
            ]
        self.vpcs.append(vpc)
        return {"Vpc": copy.deepcopy(vpc)}

    def create_subnet(self, **kwargs):
        self._record("create_subnet", kwargs)
        self._require_vpc(kwargs["VpcId"], "CreateSubnet")
        subnet = {
            "SubnetId": self._new_id("subnet"),
            "VpcId": kwargs["VpcId"],
            "CidrBlock": kwargs["CidrBlock"],
            "DefaultForAz": False,
            "AvailabilityZone": "us-east-1a",
            "Tags": self._tags(kwargs, "subnet"),
        }
        self.subnets.append(subnet)
        return {"Subnet": copy.deepcopy(subnet)}

    def create_security_group(self, **kwargs):
        self._record("create_security_group", kwargs)
        self._require_vpc(kwargs["VpcId"], "CreateSecurityGroup")
        for group in self.security_groups:
            if group["GroupName"] == kwargs["GroupName"] and group["VpcId"] == kwargs["VpcId"]:
                raise self._error(
                    "InvalidGroup.Duplicate",
                    f"The security group '{kwargs['GroupName']}' already exists",
                    "CreateSecurityGroup",
                )
        group = self.add_security_group(kwargs["GroupName"], kwargs["VpcId"])
        group["Description"] = kwargs["Description"]
        group["Tags"] = self._tags(kwargs, "security-group")
        return {"GroupId": group["GroupId"]}

    def authorize_security_group_ingress(self, **kwargs):
        self._record("authorize_security_group_ingress", kwargs)
        group = next((g for g in self.security_groups if g["GroupId"] == kwargs["GroupId"]), None)
        if group is None:
            raise self._error(
                "InvalidGroup.NotFound",
                f"The security group '{kwargs['GroupId']}' does not exist",
                "AuthorizeSecurityGroupIngress",
            )
        group["IpPermissions"].extend(copy.deepcopy(kwargs["IpPermissions"]))
        return {"Return": True}

    # Internals

    def _new_id(self, prefix):
        return f"{prefix}-{next(self._ids):017x}"

    def _record(self, method, kwargs):
        self.calls.append((method, copy.deepcopy(kwargs)))
        if self._failures.get(method):
            raise self._failures[method].pop(0)
        if self._responses.get(method):
            return self._responses[method].pop(0)
        return None

    @staticmethod
    def _error(code, message, operation):
        return ClientError({"Error": {"Code": code, "Message": message}}, operation)

    def _select(self, resources, id_key, ids, not_found_code):
        if ids is None:
            return copy.deepcopy(resources)
        by_id = {r[id_key]: r for r in resources}
        missing = [i for i in ids if i not in by_id]
        if missing:
            raise self._error(not_found_code, f"The ID '{missing[0]}' does not exist", "Describe")
        return [copy.deepcopy(by_id[i]) for i in ids]

    @staticmethod
    def _filter(resources, filters):
        def value_of(resource, name):
            if name.startswith("tag:"):
                key = name[len("tag:"):]
                return next((t["Value"] for t in resource.get("Tags", []) if t["Key"] == key), None)
            field = {"vpc-id": "VpcId", "group-name": "GroupName"}[name]
            return resource.get(field)

        for f in filters or []:
            resources = [r for r in resources if value_of(r, f["Name"]) in f["Values"]]
        return resources

    @staticmethod
    def _tags(kwargs, resource_type):
        for spec in kwargs.get("TagSpecifications", []):
            if spec["ResourceType"] == resource_type:
                return copy.deepcopy(spec["Tags"])
        return []

    def _require_vpc(self, vpc_id, operation):
        if not any(v["VpcId"] == vpc_id for v in self.vpcs):
            raise self._error("InvalidVpcID.NotFound", f"The vpc ID '{vpc_id}' does not exist", operation)

@pytest.fixture
def ec2():
    """Fixture providing an empty fake EC2 account."""
    return FakeEC2Client()
