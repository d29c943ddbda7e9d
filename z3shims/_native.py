"""
_native.py — Thin access layer over the ``z3core`` ctypes binding
==================================================================

Everything that touches ctypes directly lives here: building native
arrays, recognising null handles, decoding three-valued results and
validating string arguments before they cross the boundary.  The rest of
the package calls ``z3core`` functions through the ``core`` alias.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterable, Iterator, Optional, Sequence

from z3 import z3core as core
from z3 import z3consts as consts
from z3.z3types import Ast as RawAst
from z3.z3types import FuncDecl as RawFuncDecl
from z3.z3types import Pattern as RawPattern
from z3.z3types import Sort as RawSort
from z3.z3types import Z3Exception

from .errors import EmbeddedNulError

logger = logging.getLogger(__name__)

__all__ = [
    "core",
    "consts",
    "RawAst",
    "RawFuncDecl",
    "RawSort",
    "RawPattern",
    "Z3Exception",
    "is_null",
    "ast_array",
    "app_array",
    "sort_array",
    "decl_array",
    "empty_patterns",
    "check_text",
    "lbool_to_optional",
    "exception_message",
    "owned",
    "raw_handles",
]


def is_null(raw: Any) -> bool:
    """True when *raw* is ``None`` or a ctypes pointer holding NULL."""
    if raw is None:
        return True
    value = getattr(raw, "value", raw)
    return not value


def _array(ctype: Any, handles: Sequence[Any]) -> Any:
    arr = (ctype * len(handles))()
    for i, h in enumerate(handles):
        arr[i] = h
    return arr


def ast_array(handles: Sequence[Any]) -> Any:
    """Native ``Z3_ast[]`` built from raw term handles."""
    return _array(RawAst, handles)


def app_array(handles: Sequence[Any]) -> Any:
    """Native ``Z3_app[]``.  The binding types app arrays as ``Z3_ast[]``."""
    return _array(RawAst, handles)


def sort_array(handles: Sequence[Any]) -> Any:
    return _array(RawSort, handles)


def decl_array(handles: Sequence[Any]) -> Any:
    return _array(RawFuncDecl, handles)


def empty_patterns() -> Any:
    return (RawPattern * 0)()


def check_text(text: str, what: str = "string argument") -> str:
    """Reject strings the C side would silently truncate."""
    if not isinstance(text, str):
        raise TypeError(f"{what} must be str, got {type(text).__name__}")
    if "\x00" in text:
        raise EmbeddedNulError(f"{what} contains an embedded null byte")
    return text


def lbool_to_optional(value: int) -> Optional[bool]:
    """Decode a native ``Z3_lbool`` into ``True`` / ``False`` / ``None``."""
    if value == consts.Z3_L_TRUE:
        return True
    if value == consts.Z3_L_FALSE:
        return False
    return None


def exception_message(exc: BaseException) -> str:
    """Readable text of a native exception (``Z3Exception.value`` may be bytes)."""
    value = getattr(exc, "value", None)
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if value is not None:
        return str(value)
    return str(exc)


@contextmanager
def owned(
    ctx_ref: Any,
    raw: Any,
    inc: Callable[[Any, Any], None],
    dec: Callable[[Any, Any], None],
) -> Iterator[Any]:
    """Hold one counted reference to a transient handle for a ``with`` block.

    Used for native objects that never escape a single façade call
    (tactics, goals, apply-results).  The release runs on every exit path.
    """
    inc(ctx_ref, raw)
    try:
        yield raw
    finally:
        dec(ctx_ref, raw)


def raw_handles(nodes: Iterable[Any]) -> list:
    """Collect ``get_raw_handle()`` of each node in order."""
    return [n.get_raw_handle() for n in nodes]
