from typing import Callable, Optional, Sequence, TypeVar

T = TypeVar("T")

def pick_default(candidates: Sequence[T], is_default: Callable[[T], bool]) -> Optional[T]:
    """
    Pick the candidate flagged as default, falling back to the first one.

    The fallback follows provider listing order, which is not guaranteed
    to be stable between calls.

    Args:
        candidates: Resources returned by a describe call
        is_default: Predicate telling whether a candidate is the default

    Returns:
        Optional[T]: The chosen candidate, or None if there are no candidates
    """
    for candidate in candidates:
        if is_default(candidate):
            return candidate
    return candidates[0] if candidates else None
