# SPDX-FileCopyrightText: 2025-present Arseny Boykov (Bobronium) <hi@bobronium.me>
#
# SPDX-License-Identifier: MIT
"""
Copy capabilities a field value may expose.

Both are ABCs with a structural ``__subclasshook__`` (in the manner of
:mod:`collections.abc`), so types opt in either by defining the relevant
protocol methods or via explicit ``register``.
"""
from __future__ import annotations

import abc
import copy
import io
import pickle
from typing import Any
from typing import TypeVar

from deepclone._errors import DeepCopyError

T = TypeVar("T")

_PICKLING_HOOKS = ("__reduce_ex__", "__reduce__", "__getstate__", "__setstate__")


def _defines(cls: type, *names: str) -> bool:
    # object provides default pickling hooks for everyone, those don't count
    return any(name in klass.__dict__ for klass in cls.__mro__[:-1] for name in names)


class Cloneable(abc.ABC):
    """Values with a one-level duplication: ``__copy__`` or a registered builtin ``.copy()``."""

    __slots__ = ()

    @classmethod
    def __subclasshook__(cls, subclass: type) -> Any:
        if cls is Cloneable and _defines(subclass, "__copy__"):
            return True
        return NotImplemented


class Serializable(abc.ABC):
    """Values that customize pickling and can be round-tripped through bytes."""

    __slots__ = ()

    @classmethod
    def __subclasshook__(cls, subclass: type) -> Any:
        if cls is Serializable and _defines(subclass, *_PICKLING_HOOKS):
            return True
        return NotImplemented


for _builtin in (list, dict, set, bytearray):
    Cloneable.register(_builtin)
del _builtin


def shallow_clone(value: T) -> T:
    return copy.copy(value)


def round_trip(value: T) -> T:
    """Copy ``value`` by pickling it into an in-memory buffer and loading it back."""
    buffer = io.BytesIO()
    try:
        pickle.Pickler(buffer, protocol=pickle.HIGHEST_PROTOCOL).dump(value)
        buffer.seek(0)
        return pickle.Unpickler(buffer).load()
    except Exception as e:
        raise DeepCopyError("failed to deep copy field using serialization") from e
