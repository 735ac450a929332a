from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from lendrecord.config.aliases import ALIAS_TABLE_ENV_VAR, get_alias_config
from lendrecord.domain.aliases import AliasTable

os.environ.pop(ALIAS_TABLE_ENV_VAR, None)

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture(autouse=True)
def reset_alias_config() -> Iterator[None]:
    get_alias_config.cache_clear()
    try:
        yield
    finally:
        get_alias_config.cache_clear()


@pytest.fixture
def alias_table() -> AliasTable:
    return AliasTable.from_mapping(
        {
            "business_name": ["business.name", "legal.name"],
            "full_name": ["applicant.first + applicant.last"],
            "requested_amount": ["requestedAmount", "loan.amount"],
            "tags": ["tags"],
        }
    )
