# SPDX-FileCopyrightText: 2025-present Arseny Boykov (Bobronium) <hi@bobronium.me>
#
# SPDX-License-Identifier: MIT
"""
Instantiation strategy for general objects.

A class "declares" its constructors in body order: the class call itself
(``__init__``/``__new__``) and every classmethod marked with :func:`constructor`.
A zero-argument constructor wins outright; otherwise constructors are probed
against the original's field values, matching parameter annotations to
field types.
"""
from __future__ import annotations

import inspect
import types
import typing
import warnings
from collections.abc import Callable
from collections.abc import Sequence
from typing import Any
from typing import NamedTuple
from typing import TypeVar

from deepclone import _config
from deepclone._errors import AmbiguousConstructorWarning
from deepclone._errors import NoSuitableConstructorError
from deepclone._errors import external_stacklevel
from deepclone._errors import qualified_name
from deepclone._fields import Field

F = TypeVar("F")

_MARKER = "__deepclone_constructor__"
_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


def constructor(method: F) -> F:
    """
    Mark a classmethod as an alternate constructor available to :func:`deepclone.deep_copy`.

    Works on either side of ``@classmethod``::

        class Temperature:
            def __init__(self, kelvin: float, scale: Scale): ...

            @constructor
            @classmethod
            def celsius(cls, degrees: float) -> Temperature: ...
    """
    function = method.__func__ if isinstance(method, classmethod) else method
    if not callable(function):
        raise TypeError(f"@constructor expects a classmethod, got {type(method).__name__}")
    setattr(function, _MARKER, True)
    return method


class Constructor(NamedTuple):
    name: str
    factory: Callable[..., Any]
    signature: inspect.Signature

    def accepts_no_arguments(self) -> bool:
        return all(
            parameter.kind in _VARIADIC or parameter.default is not inspect.Parameter.empty
            for parameter in self.signature.parameters.values()
        )


class Plan(NamedTuple):
    """How to build the empty-state instance of one object."""

    constructor: Constructor
    kind: str  # "no-arg" or "parameterized"
    args: tuple[Any, ...]
    kwargs: dict[str, Any]

    def build(self) -> Any:
        return self.constructor.factory(*self.args, **self.kwargs)


def _signature(factory: Callable[..., Any]) -> inspect.Signature | None:
    try:
        try:
            return inspect.signature(factory, eval_str=True)
        except NameError:
            # unresolvable annotations are compared as strings
            return inspect.signature(factory)
    except (ValueError, TypeError):
        return None


def declared_constructors(cls: type) -> list[Constructor]:
    candidates: list[tuple[str, Callable[..., Any]]] = []
    if "__init__" not in cls.__dict__:
        candidates.append(("__init__", cls))
    for name, attribute in cls.__dict__.items():
        if name == "__init__":
            candidates.append((name, cls))
        elif isinstance(attribute, classmethod) and getattr(attribute.__func__, _MARKER, False):
            candidates.append((name, getattr(cls, name)))

    constructors = []
    for name, factory in candidates:
        signature = _signature(factory)
        if signature is not None:
            constructors.append(Constructor(name, factory, signature))
    return constructors


def _field_for(parameter: inspect.Parameter, fields: Sequence[Field]) -> Field | None:
    names = (parameter.name, f"_{parameter.name}")
    if parameter.annotation is inspect.Parameter.empty:
        return next((field for field in fields if field.name in names), None)

    matching = [field for field in fields if field.declared_type == parameter.annotation]
    for field in matching:
        if field.name in names:
            return field
    if matching:
        return matching[0]

    # declared type differs from the annotation, e.g. list vs list[int] or str vs str | None
    return next(
        (
            field
            for field in fields
            if field.name in names and _accepts(parameter.annotation, field.value)
        ),
        None,
    )


def _accepts(annotation: Any, value: Any) -> bool:
    if annotation is Any:
        return True
    if annotation is None or annotation is type(None):
        return value is None
    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        return any(_accepts(arg, value) for arg in typing.get_args(annotation))
    try:
        return isinstance(value, origin or annotation)
    except TypeError:
        # unresolved string annotations, Literal, TypeVar and the like
        return False


def _bind(ctor: Constructor, fields: Sequence[Field]) -> Plan | None:
    args: list[Any] = []
    kwargs: dict[str, Any] = {}
    bound: dict[str, list[str]] = {}

    for parameter in ctor.signature.parameters.values():
        if parameter.kind in _VARIADIC:
            continue
        field = _field_for(parameter, fields)
        if field is not None:
            value = field.value
            bound.setdefault(field.name, []).append(parameter.name)
        elif parameter.default is not inspect.Parameter.empty:
            value = parameter.default
        else:
            return None
        if parameter.kind is inspect.Parameter.KEYWORD_ONLY:
            kwargs[parameter.name] = value
        else:
            args.append(value)

    shared = {name: parameters for name, parameters in bound.items() if len(parameters) > 1}
    if shared and _config.settings.ambiguous_binding_warning:
        _warn_ambiguous_binding(ctor, shared)
    return Plan(ctor, "parameterized", tuple(args), kwargs)


def _warn_ambiguous_binding(ctor: Constructor, shared: dict[str, list[str]]) -> None:
    owner = ctor.factory if isinstance(ctor.factory, type) else ctor.factory.__self__
    where = f"{qualified_name(owner)}.{ctor.name}"
    details = "; ".join(
        f"{', '.join(repr(name) for name in parameters)} <- field {field!r}"
        for field, parameters in shared.items()
    )
    warnings.warn(
        f"\n\nSeveral parameters of '{where}' were bound to the same field while"
        f" probing for a constructor: {details}.\n"
        "Fields are matched by annotation, and when a type is shared the first field wins.\n"
        "The copy is still completed by the field pass, but the constructor saw duplicated"
        " values.\n\n"
        "To fix this, either:\n"
        f"  - name '{where}' parameters after the fields they initialize, or\n"
        "  - add a parameterless @deepclone.constructor classmethod.\n\n"
        "To silence this warning:\n"
        f"  export {_config.NO_AMBIGUOUS_BINDING_WARNING_VAR}=1\n",
        AmbiguousConstructorWarning,
        stacklevel=external_stacklevel(),
    )


def plan(cls: type, fields: Sequence[Field]) -> Plan:
    """
    Pick how to instantiate a fresh ``cls`` for a copy whose original has ``fields``.

    Raises :class:`NoSuitableConstructorError` when nothing can be called.
    """
    constructors = declared_constructors(cls)

    for ctor in constructors:
        if ctor.accepts_no_arguments():
            return Plan(ctor, "no-arg", (), {})

    for ctor in constructors:
        bound = _bind(ctor, fields)
        if bound is not None:
            return bound

    raise NoSuitableConstructorError(f"{qualified_name(cls)} has no suitable constructor")
