# SPDX-FileCopyrightText: 2025-present Arseny Boykov (Bobronium) <hi@bobronium.me>
#
# SPDX-License-Identifier: MIT
from __future__ import annotations

import inspect
import typing
from typing import Any
from typing import NamedTuple

_NOT_FIELDS = frozenset({"__dict__", "__weakref__"})


class Field(NamedTuple):
    name: str
    declared_type: Any
    value: Any
    # slot descriptor, None for attributes stored in the instance __dict__
    slot: Any = None


def declared_types(cls: type) -> dict[str, Any]:
    """Resolved class annotations, falling back to the raw ones when they don't resolve."""
    try:
        return typing.get_type_hints(cls)
    except (NameError, TypeError):
        hints: dict[str, Any] = {}
        for klass in reversed(cls.__mro__):
            hints.update(inspect.get_annotations(klass))
        return hints


def _mangle(klass: type, name: str) -> str:
    if name.startswith("__") and not name.endswith("__"):
        return f"_{klass.__name__.lstrip('_')}{name}"
    return name


def _slot_names(klass: type) -> tuple[str, ...]:
    slots = klass.__dict__.get("__slots__", ())
    if isinstance(slots, str):
        return (slots,)
    return tuple(slots)


def snapshot(obj: Any) -> list[Field]:
    """
    Read every field of ``obj``, bypassing ``__getattribute__`` and properties.

    Instance ``__dict__`` entries come first in insertion order,
    then set slots from the root of the MRO down.
    """
    cls = type(obj)
    hints = declared_types(cls)
    fields = []

    try:
        instance_dict = object.__getattribute__(obj, "__dict__")
    except AttributeError:
        instance_dict = {}
    for name, value in instance_dict.items():
        fields.append(Field(name, hints.get(name, type(value)), value))

    for klass in reversed(cls.__mro__):
        for slot_name in _slot_names(klass):
            if slot_name in _NOT_FIELDS:
                continue
            name = _mangle(klass, slot_name)
            descriptor = klass.__dict__[name]
            try:
                value = descriptor.__get__(obj, cls)
            except AttributeError:
                continue  # unset slot
            fields.append(Field(name, hints.get(name, type(value)), value, descriptor))

    return fields


def write(target: Any, field: Field, value: Any) -> None:
    """Store ``value`` as ``field`` of ``target`` without going through ``__setattr__``."""
    if field.slot is not None:
        field.slot.__set__(target, value)
    else:
        object.__getattribute__(target, "__dict__")[field.name] = value
