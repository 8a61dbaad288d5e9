"""Locate the user code that issued an assertion."""

from __future__ import annotations

import inspect
import linecache
import os
import sys
from typing import Callable, TypeVar

from verity.core.types import SourceLocation

T = TypeVar("T")

_PACKAGE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__))) + os.sep

_tagged_code: set = set()


def _unwrap(attr: object):
    if isinstance(attr, (staticmethod, classmethod)):
        return attr.__func__
    return attr


def custom_assertion(target: T) -> T:
    """
    Mark a function (or every method of a class) as an assertion helper.

    Failures raised from inside a tagged helper are attributed to the code
    calling the helper, and the helper's name becomes the assertion name.
    """
    if inspect.isclass(target):
        for attr in vars(target).values():
            if isinstance(attr, property):
                for accessor in (attr.fget, attr.fset, attr.fdel):
                    if accessor is not None:
                        _tagged_code.add(accessor.__code__)
                continue
            func = _unwrap(attr)
            if inspect.isfunction(func):
                _tagged_code.add(func.__code__)
        return target
    func = inspect.unwrap(_unwrap(target))
    _tagged_code.add(func.__code__)
    return target


def is_custom_assertion(func: Callable) -> bool:
    return getattr(inspect.unwrap(func), "__code__", None) in _tagged_code


def _is_internal(frame) -> bool:
    code = frame.f_code
    if code in _tagged_code:
        return True
    return os.path.abspath(code.co_filename).startswith(_PACKAGE_DIR)


def find_caller() -> tuple[SourceLocation | None, str | None]:
    """
    First frame outside this package and outside tagged helpers.

    Returns:
        ``(location, assertion_name)``; the name is the function of the
        frame directly inside the caller. ``(None, None)`` when the whole
        stack is internal.
    """
    frame = sys._getframe(1)
    inner = None
    while frame is not None and _is_internal(frame):
        inner = frame
        frame = frame.f_back
    if frame is None:
        return None, None
    filename = frame.f_code.co_filename
    code = linecache.getline(filename, frame.f_lineno).strip()
    location = SourceLocation(
        file=filename,
        line=frame.f_lineno,
        function=frame.f_code.co_name,
        code=code,
    )
    return location, inner.f_code.co_name if inner is not None else None
