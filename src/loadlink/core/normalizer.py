"""Pre-decode repair of device payloads.

Some firmware builds serialize a numeric enumeration field as its descriptive
label (``"unit": "lbs"`` instead of ``"unit": 1``). Rather than fail the whole
decode, such fields are dropped so the model falls back to its default. When
the label follows the numeric value under the same key, the number is kept.
"""

from __future__ import annotations

import logging
import types
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Union, get_args, get_origin

from pydantic import BaseModel

logger = logging.getLogger(__name__)

NUMERIC_TYPES: tuple[type, ...] = (int, float)


@dataclass(frozen=True)
class FieldRule:
    name: str
    expected: tuple[type, ...]

    def rejects(self, value: Any) -> bool:
        # only the string-for-number mismatch is repaired
        return isinstance(value, str) and not issubclass(str, self.expected)


def _numeric_types(annotation: Any) -> tuple[type, ...]:
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
    else:
        members = [annotation]

    if members and all(member in NUMERIC_TYPES for member in members):
        return tuple(members)
    return ()


class PayloadNormalizer:
    def __init__(self, rules: Iterable[FieldRule]) -> None:
        self._rules = {rule.name: rule for rule in rules}

    @classmethod
    def for_model(cls, model: type[BaseModel]) -> PayloadNormalizer:
        """Build rules for every top-level numeric field of ``model``."""
        rules = []
        for name, field in model.model_fields.items():
            expected = _numeric_types(field.annotation)
            if expected:
                rules.append(FieldRule(name=field.alias or name, expected=expected))
        return cls(rules)

    @property
    def field_names(self) -> frozenset[str]:
        return frozenset(self._rules)

    def merge_pairs(self, pairs: Iterable[tuple[str, Any]]) -> dict[str, Any]:
        """Build an object from decoded key/value pairs.

        A repeated key whose later value is a label never replaces an earlier
        value: the firmware sends ``"unit": 1`` and then ``"unit": "lbs"``.
        """
        merged: dict[str, Any] = {}
        for key, value in pairs:
            rule = self._rules.get(key)
            if key in merged and rule is not None and rule.rejects(value):
                logger.debug("Keeping %r=%r over repeated %r", key, merged[key], value)
                continue
            merged[key] = value
        return merged

    def normalize(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        cleaned: dict[str, Any] = {}
        for key, value in payload.items():
            rule = self._rules.get(key)
            if rule is not None and rule.rejects(value):
                logger.debug("Dropping field %r: expected number, got %r", key, value)
                continue
            cleaned[key] = value
        return cleaned
