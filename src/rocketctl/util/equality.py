"""
Structural (deep) equality for configuration and status values.

Used for change detection: a freshly fetched value is compared against a cached
one and only a structural difference counts as a change.

Rules:
- Identical objects are equal.
- Two primitives are equal when their values are equal (bool only equals bool).
- Composite values (mappings, lists/tuples, sets, numpy arrays, dataclasses,
  plain objects) must be of the exact same type and carry the same own fields,
  with equal values at every depth.
"""

from __future__ import annotations

import dataclasses
import types
from collections.abc import Mapping
from functools import singledispatch
from typing import Any

import numpy as np

# CPython type flag set on classes defined in Python (not in C)
_HEAPTYPE = 1 << 9


class CyclicStructureError(ValueError):
    """Raised when a value refers back to itself on the comparison path."""


# ---------------------------------------- #
#  Own-field enumeration per value kind    #
# ---------------------------------------- #


def _state_in_dict(cls: type) -> bool:
    # Builtin and extension bases keep state outside __dict__ (partial, array, ...)
    return all(t.__flags__ & _HEAPTYPE for t in cls.__mro__[:-1])


@singledispatch
def own_fields(value: Any) -> Mapping[Any, Any] | None:
    """Return the own fields of a composite value, or None for a primitive."""
    if isinstance(
        value,
        (type, types.FunctionType, types.MethodType, types.BuiltinFunctionType, types.ModuleType),
    ):
        return None
    if dataclasses.is_dataclass(value):
        return {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
    if not _state_in_dict(type(value)):
        return None
    try:
        return vars(value)
    except TypeError:
        return None


@own_fields.register(Mapping)
def _(value) -> Mapping[Any, Any]:
    return value


@own_fields.register(BaseException)
def _(value) -> Mapping[Any, Any]:
    return {"args": value.args, **vars(value)}


@own_fields.register(list)
@own_fields.register(tuple)
def _(value) -> Mapping[Any, Any]:
    return dict(enumerate(value))


@own_fields.register(set)
@own_fields.register(frozenset)
def _(value) -> Mapping[Any, Any]:
    return {v: v for v in value}


@own_fields.register(str)
@own_fields.register(bytes)
def _(value) -> None:
    return None


# ---------------------------------------- #


def _primitive_equals(x: Any, y: Any) -> bool:
    if isinstance(x, bool) or isinstance(y, bool):
        return type(x) is type(y) and x == y
    if x is None or y is None:
        return False
    return bool(x == y)


# ---------------------------------------- #


def _array_equals(x: np.ndarray, y: np.ndarray) -> bool:
    return x.dtype == y.dtype and x.shape == y.shape and bool(np.array_equal(x, y))


# ---------------------------------------- #

# Stack marker: the composite whose id follows has been fully walked
_LEAVE = object()


def _compare_leaf(x: Any, y: Any) -> tuple[bool, Mapping[Any, Any] | None, Mapping[Any, Any] | None]:
    # Returns (equal so far, fields of x, fields of y); fields are None when the
    # pair was decided without descending.
    x_is_array = isinstance(x, np.ndarray)
    if x_is_array or isinstance(y, np.ndarray):
        return x_is_array and type(x) is type(y) and _array_equals(x, y), None, None

    fx = own_fields(x)
    fy = own_fields(y)
    if fx is None and fy is None:
        return _primitive_equals(x, y), None, None
    if fx is None or fy is None or type(x) is not type(y):
        return False, None, None
    return True, fx, fy


def structural_equals(x: Any, y: Any) -> bool:
    """
    Return True when x and y are structurally identical.

    The walk uses an explicit stack, so nesting depth is not limited by the
    interpreter's recursion limit. Cyclic values are not supported and raise
    CyclicStructureError.
    """
    path: set[int] = set()
    stack: list[tuple[Any, Any]] = [(x, y)]

    while stack:
        a, b = stack.pop()
        if a is _LEAVE:
            path.discard(b)
            continue
        if a is b:
            continue

        equal, fa, fb = _compare_leaf(a, b)
        if not equal:
            return False
        if fa is None or fb is None:
            continue

        if id(a) in path:
            raise CyclicStructureError(f"cyclic reference through {type(a).__name__}")

        for key in fa:
            if key not in fb:
                return False
        for key in fb:
            if key not in fa:
                return False

        path.add(id(a))
        stack.append((_LEAVE, id(a)))
        # Reversed so fields are visited in their own order
        for key in reversed(list(fa)):
            av = fa[key]
            bv = fb[key]
            if av is not bv:
                stack.append((av, bv))

    return True
