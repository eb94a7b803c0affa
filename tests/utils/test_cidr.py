import ipaddress
import pytest
from cloudnet.errors import ErrorKind, ProviderError
from cloudnet.utils.cidr import allocate_new_cidr_block

def _overlaps(first, second):
    return ipaddress.ip_network(first).overlaps(ipaddress.ip_network(second))

def test_allocate_first_block_when_none_used():
    """Test allocation in an empty account."""
    assert allocate_new_cidr_block([]) == "10.0.0.0/16"

def test_allocate_skips_used_blocks():
    """Test that the allocated block is outside every existing block."""
    existing = ["10.0.0.0/16", "10.1.0.0/16"]

    block = allocate_new_cidr_block(existing)

    assert block == "10.2.0.0/16"
    assert not any(_overlaps(block, used) for used in existing)

def test_allocate_skips_partially_overlapping_blocks():
    """Test that smaller and larger existing blocks are both respected."""
    # 10.0.128.0/24 sits inside 10.0.0.0/16, 10.2.0.0/15 covers 10.2 and 10.3
    assert allocate_new_cidr_block(["10.0.128.0/24", "10.2.0.0/15"]) == "10.1.0.0/16"
    assert allocate_new_cidr_block(["10.0.0.0/15"]) == "10.2.0.0/16"

def test_allocate_ignores_unrelated_and_invalid_blocks():
    """Test that non-overlapping, IPv6 and unparsable entries do not matter."""
    block = allocate_new_cidr_block(["172.31.0.0/16", "2600:1f18::/56", "not-a-cidr", None])

    assert block == "10.0.0.0/16"

def test_allocate_with_smaller_prefix():
    """Test allocation with a /20 prefix."""
    assert allocate_new_cidr_block(["10.0.0.0/20"], prefix_length=20) == "10.0.16.0/20"

def test_allocate_exhausted():
    """Test that a full 10.0.0.0/8 raises a provider error."""
    with pytest.raises(ProviderError) as exc_info:
        allocate_new_cidr_block(["10.0.0.0/8"])

    assert exc_info.value.kind == ErrorKind.LIMIT_EXCEEDED

def test_allocate_rejects_bad_prefix():
    """Test that prefix lengths outside 9-28 are refused."""
    with pytest.raises(ValueError):
        allocate_new_cidr_block([], prefix_length=30)
