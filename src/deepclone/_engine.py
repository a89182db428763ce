# SPDX-FileCopyrightText: 2025-present Arseny Boykov (Bobronium) <hi@bobronium.me>
#
# SPDX-License-Identifier: MIT
from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import Any
from typing import TypeVar

from deepclone import _config
from deepclone import _construct
from deepclone import _fields
from deepclone._capabilities import Cloneable
from deepclone._capabilities import Serializable
from deepclone._capabilities import round_trip
from deepclone._capabilities import shallow_clone
from deepclone._classify import Category
from deepclone._classify import classify
from deepclone._classify import record_components
from deepclone._errors import CopyDepthError
from deepclone._errors import DeepCopyError
from deepclone._errors import qualified_name

T = TypeVar("T")

# surfaced as is instead of being wrapped at every level on the way up
_PASSTHROUGH = (CopyDepthError, RecursionError)

_NOT_COPIED = object()


def deep_copy(x: T) -> T:
    """
    Return a deep copy of x.

    :param x: object to copy.
    :return: a copy sharing no mutable state with `x`.
    :raises DeepCopyError: when some part of `x` can't be copied.
    """
    return _deep_copy(x, 0)


def _deep_copy(value: Any, depth: int) -> Any:
    max_depth = _config.settings.max_depth
    if depth > max_depth:
        raise CopyDepthError(
            f"exceeded maximum copy depth of {max_depth} while copying"
            f" {qualified_name(type(value))}; reference cycles are not supported"
        )
    return _COPIERS[classify(value)](value, depth)


def _identity(value: Any, depth: int) -> Any:
    return value


def _copy_field_value(value: Any, depth: int) -> Any:
    if isinstance(value, Cloneable):
        return shallow_clone(value)
    if _config.settings.serialization_fallback and isinstance(value, Serializable):
        return round_trip(value)
    return _deep_copy(value, depth + 1)


def _copy_fields(
    original: Any,
    target: Any,
    depth: int,
    fields: list[_fields.Field] | None = None,
) -> None:
    if fields is None:
        fields = _fields.snapshot(original)
    for field in fields:
        _fields.write(target, field, _copy_field_value(field.value, depth))


def _copy_sequence(value: Any, depth: int) -> Any:
    try:
        if isinstance(value, tuple):
            items = [_deep_copy(item, depth + 1) for item in value]
            copied = tuple(items) if type(value) is tuple else tuple.__new__(type(value), items)
        else:
            copied = shallow_clone(value)
            for index, item in enumerate(value):
                copied[index] = _deep_copy(item, depth + 1)
        _copy_fields(value, copied, depth)
    except _PASSTHROUGH:
        raise
    except Exception as e:
        raise DeepCopyError(
            f"failed to deep copy sequence of type {qualified_name(type(value))}"
        ) from e
    return copied


def _copy_mapping(value: Any, depth: int) -> Any:
    try:
        copied = shallow_clone(value)
        copied.clear()
        for key, item in value.items():
            copied[_deep_copy(key, depth + 1)] = _deep_copy(item, depth + 1)
        _copy_fields(value, copied, depth)
    except _PASSTHROUGH:
        raise
    except Exception as e:
        raise DeepCopyError(
            f"failed to deep copy mapping of type {qualified_name(type(value))}"
        ) from e
    return copied


def _copy_set(value: Any, depth: int) -> Any:
    try:
        items = [_deep_copy(item, depth + 1) for item in value]
        if isinstance(value, frozenset):
            cls = type(value)
            copied = frozenset(items) if cls is frozenset else frozenset.__new__(cls, items)
        else:
            copied = shallow_clone(value)
            copied.clear()
            copied.update(items)
        _copy_fields(value, copied, depth)
    except _PASSTHROUGH:
        raise
    except Exception as e:
        raise DeepCopyError(f"failed to deep copy set of type {qualified_name(type(value))}") from e
    return copied


def _copy_record(value: Any, depth: int) -> Any:
    cls = type(value)
    try:
        components = record_components(cls)
        # components are copied before anything is constructed
        copied = {name: _deep_copy(getattr(value, name), depth + 1) for name in components}
        return _canonical_constructor(cls, components)(**copied)
    except _PASSTHROUGH:
        raise
    except Exception as e:
        raise DeepCopyError(f"failed to deep copy record of type {qualified_name(cls)}") from e


def _canonical_constructor(cls: type, components: tuple[str, ...]) -> Callable[..., Any]:
    parameters = [
        parameter.name
        for parameter in inspect.signature(cls).parameters.values()
        if parameter.kind not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
    ]
    if tuple(parameters) != components:
        raise TypeError(
            f"{qualified_name(cls)} has no canonical constructor:"
            f" expected parameters {components}, got {tuple(parameters)}"
        )
    return cls


def _copy_object(value: Any, depth: int) -> Any:
    cls = type(value)
    try:
        fields = _fields.snapshot(value)
    except Exception as e:
        raise DeepCopyError(f"failed to read fields of object of type {qualified_name(cls)}") from e

    if not fields:
        # state lives outside of instance attributes, e.g. in a C struct
        opaque = _copy_opaque(value)
        if opaque is not _NOT_COPIED:
            return opaque

    plan = _construct.plan(cls, fields)
    try:
        copied = plan.build()
        _copy_fields(value, copied, depth, fields)
    except _PASSTHROUGH:
        raise
    except Exception as e:
        raise DeepCopyError(
            f"failed to deep copy object of type {qualified_name(cls)} with {plan.kind} constructor"
        ) from e
    return copied


def _copy_opaque(value: Any) -> Any:
    if isinstance(value, Cloneable):
        try:
            return shallow_clone(value)
        except Exception as e:
            raise DeepCopyError(
                f"failed to deep copy object of type {qualified_name(type(value))}"
                " with its __copy__"
            ) from e
    if _config.settings.serialization_fallback and isinstance(value, Serializable):
        return round_trip(value)
    return _NOT_COPIED


_COPIERS: dict[Category, Callable[[Any, int], Any]] = {
    Category.ABSENT: _identity,
    Category.SCALAR: _identity,
    Category.CONSTANT: _identity,
    Category.RECORD: _copy_record,
    Category.SEQUENCE: _copy_sequence,
    Category.MAPPING: _copy_mapping,
    Category.SET: _copy_set,
    Category.OBJECT: _copy_object,
}
