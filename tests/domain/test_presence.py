from __future__ import annotations

import math

import pytest

from lendrecord.domain.presence import is_present


@pytest.mark.parametrize(
    "value",
    [0, 0.0, False, True, "x", " x ", [0], (0,), {"a": 1}, -1, "0"],
)
def test_present_values(value: object) -> None:
    assert is_present(value)


@pytest.mark.parametrize(
    "value",
    [None, "", "   ", "\t\n", [], (), {}, math.nan],
)
def test_absent_values(value: object) -> None:
    assert not is_present(value)
