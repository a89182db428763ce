# SPDX-FileCopyrightText: 2025-present Arseny Boykov (Bobronium) <hi@bobronium.me>
#
# SPDX-License-Identifier: MIT
from __future__ import annotations

import array
import dataclasses
import datetime
import decimal
import enum
import fractions
import pathlib
import types
import uuid
import weakref
from collections import deque
from typing import Any

SCALAR_TYPES = (
    str,
    bytes,
    bool,
    int,
    float,
    complex,
    # immutable values without instance attributes to walk
    decimal.Decimal,
    fractions.Fraction,
    datetime.date,
    datetime.time,
    datetime.timedelta,
    datetime.timezone,
    uuid.UUID,
    pathlib.PurePath,
)

CONSTANT_TYPES = (
    enum.Enum,
    type,
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    types.ModuleType,
    types.CodeType,
    range,
    property,
    weakref.ref,
    type(Ellipsis),
    type(NotImplemented),
)

SEQUENCE_TYPES = (list, tuple, bytearray, array.array, deque)


class Category(enum.Enum):
    ABSENT = "absent"
    SCALAR = "scalar"
    CONSTANT = "constant"
    RECORD = "record"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    SET = "set"
    OBJECT = "object"


def is_record(cls: type) -> bool:
    """
    Fixed-shape aggregates: named tuples and frozen dataclasses
    whose every field is a positional ``__init__`` parameter, in field order.
    """
    if issubclass(cls, tuple):
        return isinstance(getattr(cls, "_fields", None), tuple)
    if dataclasses.is_dataclass(cls):
        # keyword-only fields are moved to the end of the generated signature
        return cls.__dataclass_params__.frozen and all(
            field.init and not field.kw_only for field in dataclasses.fields(cls)
        )
    return False


def record_components(cls: type) -> tuple[str, ...]:
    if issubclass(cls, tuple):
        return cls._fields
    return tuple(field.name for field in dataclasses.fields(cls))


def classify(value: Any) -> Category:
    """
    Return the copy category of ``value``.

    Order of checks is significant: e.g. an ``IntEnum`` member is a scalar
    and a named tuple is a record, not a sequence.
    """
    if value is None:
        return Category.ABSENT
    if isinstance(value, SCALAR_TYPES):
        return Category.SCALAR
    if isinstance(value, CONSTANT_TYPES):
        return Category.CONSTANT
    if is_record(type(value)):
        return Category.RECORD
    if isinstance(value, SEQUENCE_TYPES):
        return Category.SEQUENCE
    if isinstance(value, dict):
        return Category.MAPPING
    if isinstance(value, (set, frozenset)):
        return Category.SET
    return Category.OBJECT
