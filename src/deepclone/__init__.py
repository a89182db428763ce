# SPDX-FileCopyrightText: 2025-present Arseny Boykov (Bobronium) <hi@bobronium.me>
#
# SPDX-License-Identifier: MIT
"""Deep copies of objects that don't know how to copy themselves."""
from deepclone._capabilities import Cloneable
from deepclone._capabilities import Serializable
from deepclone._classify import Category
from deepclone._classify import classify
from deepclone._construct import constructor
from deepclone._engine import deep_copy
from deepclone._errors import AmbiguousConstructorWarning
from deepclone._errors import CopyDepthError
from deepclone._errors import DeepCopyError
from deepclone._errors import NoSuitableConstructorError

Error = DeepCopyError

__all__ = [
    "AmbiguousConstructorWarning",
    "Category",
    "Cloneable",
    "CopyDepthError",
    "DeepCopyError",
    "Error",
    "NoSuitableConstructorError",
    "Serializable",
    "classify",
    "constructor",
    "deep_copy",
]
