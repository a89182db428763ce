# SPDX-FileCopyrightText: 2025-present Arseny Boykov (Bobronium) <hi@bobronium.me>
#
# SPDX-License-Identifier: MIT
from typing import NamedTuple


class XT(NamedTuple):
    tags: list[str]


X = XT(["a"])
