# SPDX-FileCopyrightText: 2025-present Arseny Boykov (Bobronium) <hi@bobronium.me>
#
# SPDX-License-Identifier: MIT
"""Environment-driven settings, read once on import."""
from __future__ import annotations

import os
import warnings
from collections.abc import Mapping
from dataclasses import dataclass

MAX_DEPTH_VAR = "DEEPCLONE_MAX_DEPTH"
NO_AMBIGUOUS_BINDING_WARNING_VAR = "DEEPCLONE_NO_AMBIGUOUS_BINDING_WARNING"
NO_SERIALIZATION_FALLBACK_VAR = "DEEPCLONE_NO_SERIALIZATION_FALLBACK"

DEFAULT_MAX_DEPTH = 100

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def _flag(environ: Mapping[str, str], name: str) -> bool:
    return environ.get(name, "").strip().lower() in _TRUTHY


def _max_depth(environ: Mapping[str, str]) -> int:
    raw = environ.get(MAX_DEPTH_VAR)
    if raw is None or not raw.strip():
        return DEFAULT_MAX_DEPTH
    try:
        value = int(raw)
    except ValueError:
        value = 0
    if value <= 0:
        warnings.warn(
            f"Ignoring {MAX_DEPTH_VAR}={raw!r}: expected a positive integer,"
            f" using default of {DEFAULT_MAX_DEPTH}.",
            RuntimeWarning,
            stacklevel=3,
        )
        return DEFAULT_MAX_DEPTH
    return value


@dataclass(frozen=True)
class Settings:
    max_depth: int = DEFAULT_MAX_DEPTH
    ambiguous_binding_warning: bool = True
    serialization_fallback: bool = True

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] = os.environ) -> Settings:
        return cls(
            max_depth=_max_depth(environ),
            ambiguous_binding_warning=not _flag(environ, NO_AMBIGUOUS_BINDING_WARNING_VAR),
            serialization_fallback=not _flag(environ, NO_SERIALIZATION_FALLBACK_VAR),
        )


settings = Settings.from_environ()
