"""
Key projection primitives.

- pick_properties:         keep whitelisted keys of a record, in whitelist order
- matches_dynamic_pattern: anchored match of a key against a '{id}' pattern
- filter_data_encr:        keep allowed keys of a data_encr blob, in blob order

All functions are pure. A list in place of a record or blob has no named
keys and projects to an empty dict; other non-mapping input (None, strings,
numbers) is passed through unchanged.
"""

import re
from functools import lru_cache
from typing import Any, Iterable, Optional, Pattern, Sequence

from core.config import DYNAMIC_ID_PLACEHOLDER


def pick_properties(obj: Any, keys: Iterable[str]) -> Any:
    """
    Pick only the given properties from a record.

    Args:
        obj: Record to project. Lists yield {}; other non-dict values are
            returned as-is.
        keys: Allowed keys; output order follows this sequence.

    Returns:
        New dict with every allowed key present in ``obj`` (shallow copy)
    """
    if isinstance(obj, list):
        return {}
    if not isinstance(obj, dict):
        return obj

    return {key: obj[key] for key in keys if key in obj}


@lru_cache(maxsize=256)
def compile_dynamic_pattern(pattern: str) -> Pattern[str]:
    """
    Compile a pattern like 'kind-{id}-nahrung' to 'kind-[0-9]+-nahrung'.

    Only the first placeholder is substituted; everything else is literal.
    """
    prefix, placeholder, suffix = pattern.partition(DYNAMIC_ID_PLACEHOLDER)
    if not placeholder:
        return re.compile(re.escape(pattern))
    return re.compile(re.escape(prefix) + '[0-9]+' + re.escape(suffix))


def matches_dynamic_pattern(key: str, pattern: str) -> bool:
    """Check if ``key`` fully matches a dynamic pattern such as 'kind-{id}-nahrung'."""
    if not isinstance(key, str):
        return False
    return compile_dynamic_pattern(pattern).fullmatch(key) is not None


def filter_data_encr(
    data_encr: Any,
    allowed_keys: Sequence[str],
    dynamic_patterns: Optional[Sequence[str]] = None
) -> Any:
    """
    Filter a data_encr blob, keeping only allowed keys.

    Keys not in ``allowed_keys`` survive only if they match one of
    ``dynamic_patterns``. Dropped keys are not reported. The output keeps the
    blob's own key order.

    Args:
        data_encr: Blob to filter. Lists yield {}; other non-dict values are
            returned as-is.
        allowed_keys: Fixed allow-list
        dynamic_patterns: Optional '{id}' patterns (care-after only)

    Returns:
        New dict with the retained keys
    """
    if isinstance(data_encr, list):
        return {}
    if not isinstance(data_encr, dict):
        return data_encr

    allowed = set(allowed_keys)
    result = {}

    for key, value in data_encr.items():
        if key in allowed:
            result[key] = value
        elif dynamic_patterns and any(matches_dynamic_pattern(key, p) for p in dynamic_patterns):
            result[key] = value

    return result
