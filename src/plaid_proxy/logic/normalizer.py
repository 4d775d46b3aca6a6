"""
Parameter-name normalization.

Callers may send snake_case, kebab-case or camelCase parameter names; the
registry only knows camelCase.
"""

import re
from typing import Any, Dict, Mapping

_SEPARATED_LOWERCASE = re.compile(r'[-_]([a-z])')


def snake_to_camel(name: str) -> str:
    """Rewrite every `-x` / `_x` (x lowercase) in `name` as `X`."""
    return _SEPARATED_LOWERCASE.sub(lambda match: match.group(1).upper(), name)


def normalize_keys(bag: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Return a new bag with camelCase keys and the same values.

    When two keys normalize to the same name, the later one in iteration
    order wins.
    """
    return {snake_to_camel(key): value for key, value in bag.items()}
