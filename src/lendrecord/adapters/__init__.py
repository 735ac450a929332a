"""Adapters reading engine inputs from external payloads."""

from __future__ import annotations

from .files import InputError, load_observations, load_sources
from .schema import ObservationPayload

__all__ = [
    "InputError",
    "ObservationPayload",
    "load_observations",
    "load_sources",
]
