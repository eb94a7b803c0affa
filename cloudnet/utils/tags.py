from typing import Dict, List, Optional

def build_aws_tags(tags: Optional[Dict[str, str]], name: str) -> List[Dict[str, str]]:
    """
    Convert a tag dictionary into the EC2 Key/Value list format.

    A Name tag is added when name is non-empty and overrides any Name
    already present in tags.

    Args:
        tags: Optional dictionary of extra tags
        name: Value for the Name tag

    Returns:
        List[Dict[str, str]]: Tags as [{"Key": ..., "Value": ...}]
    """
    merged = dict(tags or {})
    if name:
        merged["Name"] = name
    return [{"Key": key, "Value": str(value)} for key, value in merged.items()]
