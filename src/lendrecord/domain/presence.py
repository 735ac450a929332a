"""The single presence predicate shared by every resolution stage.

A value is *present* when it counts as meaningfully provided:

- ``None`` is never present
- strings are present when they contain non-whitespace characters
- lists and tuples are present when non-empty
- floats are present unless NaN (zero is present)
- mappings are present when they have at least one key
- booleans, ``False`` included, and every other value are present
"""

from __future__ import annotations

import math
from collections.abc import Mapping


def is_present(value: object) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, list | tuple):
        return len(value) > 0
    if isinstance(value, float):
        return not math.isnan(value)
    if isinstance(value, Mapping):
        return len(value) > 0
    return True
