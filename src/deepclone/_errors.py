# SPDX-FileCopyrightText: 2025-present Arseny Boykov (Bobronium) <hi@bobronium.me>
#
# SPDX-License-Identifier: MIT
from __future__ import annotations

import copy
import sys

_PACKAGE = __name__.partition(".")[0]


class DeepCopyError(copy.Error):
    """
    Raised when a value cannot be deep copied.

    The message names the failed operation and the offending type,
    the underlying failure (if any) is available as ``__cause__``.
    """


class NoSuitableConstructorError(DeepCopyError):
    """Neither a zero-argument constructor nor a satisfiable parameterized one exists."""


class CopyDepthError(DeepCopyError):
    """Maximum copy depth exceeded, usually because of a reference cycle."""


class AmbiguousConstructorWarning(UserWarning):
    """Constructor probing bound one field to several parameters."""


def qualified_name(cls: type) -> str:
    if cls.__module__ == "builtins":
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"


def external_stacklevel() -> int:
    """
    Return ``stacklevel`` for a ``warnings.warn`` call made by the caller of this function,
    pointing at the first frame outside of the package.
    """
    frame = sys._getframe(1)
    level = 1
    while frame is not None and frame.f_globals.get("__name__", "").partition(".")[0] == _PACKAGE:
        frame = frame.f_back
        level += 1
    return level
