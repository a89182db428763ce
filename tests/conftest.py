# SPDX-FileCopyrightText: 2025-present Arseny Boykov (Bobronium) <hi@bobronium.me>
#
# SPDX-License-Identifier: MIT
from __future__ import annotations

import ast
import copy as stdlib_copy
import inspect
import marshal
import os
import subprocess
import sys
import textwrap
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING
from typing import Any

import pytest
from _pytest.assertion.rewrite import rewrite_asserts

import deepclone

if TYPE_CHECKING:
    from types import CodeType
    from types import FunctionType

ENVIRON_VARS = (
    "DEEPCLONE_MAX_DEPTH",
    "DEEPCLONE_NO_AMBIGUOUS_BINDING_WARNING",
    "DEEPCLONE_NO_SERIALIZATION_FALLBACK",
)


def env(**overrides: str) -> dict[str, str]:
    """Current environment with every deepclone variable unset, then ``overrides`` applied."""
    environ = {key: value for key, value in os.environ.items() if key not in ENVIRON_VARS}
    environ.update(overrides)
    return environ


def pytest_configure(config):
    config.addinivalue_line(
        "markers",
        "subprocess(environ=None): run the body of the test in a fresh Python subprocess",
    )


@pytest.fixture(
    params=[
        pytest.param(stdlib_copy.deepcopy, id="stdlib"),
        pytest.param(deepclone.deep_copy, id="deepclone"),
    ]
)
def deep_copy(request) -> Callable[[Any], Any]:
    """Both copiers, for behavior that plain data must share with ``copy.deepcopy``."""
    return request.param


def _body_of(function: FunctionType) -> tuple[str, int]:
    """Return dedented source of the function body and the line it starts on."""
    lines, first_lineno = inspect.getsourcelines(function)
    for offset, line in enumerate(lines):
        if line.lstrip().startswith("def "):
            body = lines[offset + 1 :]
            return textwrap.dedent("".join(body)), first_lineno + offset + 1
    raise RuntimeError(f"Could not find the body of {function.__qualname__}")


def _check_isolated(function: FunctionType) -> None:
    code = function.__code__
    takes_arguments = (
        code.co_argcount
        or code.co_posonlyargcount
        or code.co_kwonlyargcount
        or code.co_flags & (inspect.CO_VARARGS | inspect.CO_VARKEYWORDS)
    )
    if takes_arguments:
        raise RuntimeError(
            f"@pytest.mark.subprocess function {function.__qualname__} must not accept arguments"
        )
    if code.co_freevars:
        raise RuntimeError(
            f"@pytest.mark.subprocess function {function.__qualname__} must not close over"
            f" outer-scope variables (freevars={code.co_freevars!r})"
        )


def _compile_body(body: str, filename: str, first_lineno: int) -> CodeType:
    """Compile with pytest assertion rewriting, keeping original file name and line numbers."""
    source = "\n" * (first_lineno - 1) + body
    tree = ast.parse(source, filename=filename)
    rewrite_asserts(tree, source.encode(), filename)
    return compile(tree, filename, "exec")


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem):
    """Run tests marked with ``@pytest.mark.subprocess`` in a fresh interpreter."""
    mark = pyfuncitem.get_closest_marker("subprocess")
    if mark is None:
        return None

    function: FunctionType = pyfuncitem.obj
    _check_isolated(function)

    body, first_lineno = _body_of(function)
    filename = str(Path(pyfuncitem.path).resolve())
    code = _compile_body(body, filename, first_lineno)

    tmp_path = pyfuncitem._request.getfixturevalue("tmp_path")
    runner = tmp_path / f"{pyfuncitem.name}_runner.py"
    runner.write_text(
        "import marshal\n"
        f"exec(marshal.loads({marshal.dumps(code)!r}), {{'__name__': '__main__'}})\n"
    )

    proc = subprocess.run(
        [sys.executable, str(runner)],
        cwd=tmp_path,
        env=mark.kwargs.get("environ", os.environ),
        capture_output=True,
        text=True,
    )
    if proc.returncode != 0:
        pytest.fail(
            f"subprocess run failed with exit code {proc.returncode}:\n\n"
            f"{proc.stdout}{proc.stderr}",
            pytrace=False,
        )
    return True
