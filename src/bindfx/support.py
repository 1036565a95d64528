"""Mapping functions for use with ObservableValue.map().

All of them accept None.
"""

from __future__ import annotations


def invert(value: bool | None) -> bool | None:
    return None if value is None else not value


def is_empty_string(value: str | None) -> bool:
    return not value


def is_non_empty_string(value: str | None) -> bool:
    return bool(value)


def is_blank_string(value: str | None) -> bool:
    return value is None or not value.strip()


def is_non_blank_string(value: str | None) -> bool:
    return not is_blank_string(value)
