"""
handle.py — One-acquire / one-release ownership of native handles
=================================================================

``NativeHandle`` is the base of every wrapper that owns a counted native
reference.  Subclasses supply the kind-specific increment and decrement
calls; the base guarantees:

* exactly one increment when the wrapper is created (``_adopt``);
* exactly one decrement, on :meth:`release` or at finalization, whichever
  comes first;
* no decrement once the owning environment has been torn down;
* ``copy.copy`` / ``copy.deepcopy`` produce a second owner that performs its
  own increment, never a second view sharing the first owner's count.

Wrappers can also be used as context managers to release deterministically.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Type, TypeVar

from .context import Context
from .errors import InvalidHandleError, PreconditionError
from ._native import is_null

logger = logging.getLogger(__name__)

__all__ = ["NativeHandle"]

H = TypeVar("H", bound="NativeHandle")


class NativeHandle:
    """Base for wrappers owning one counted native reference."""

    __slots__ = ("_ctx", "_raw", "__weakref__")

    kind: str = "handle"

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        # Subclass constructors build the native object and then call _own().
        self._ctx: Optional[Context] = None
        self._raw: Any = None

    # -- kind-specific native calls -------------------------------------

    def _inc_ref(self, ctx: Context, raw: Any) -> None:
        raise NotImplementedError

    def _dec_ref(self, ctx: Context, raw: Any) -> None:
        raise NotImplementedError

    # -- ownership ---------------------------------------------------------

    def _own(self, ctx: Context, raw: Any) -> None:
        if is_null(raw):
            raise InvalidHandleError(f"cannot wrap a null {self.kind} handle")
        self._inc_ref(ctx, raw)
        self._ctx = ctx
        self._raw = raw

    @classmethod
    def _adopt(cls: Type[H], ctx: Context, raw: Any) -> H:
        obj = cls.__new__(cls)
        obj._ctx = None
        obj._raw = None
        obj._own(ctx, raw)
        return obj

    def release(self) -> None:
        """Give back the native reference now.  Later calls are no-ops."""
        raw, self._raw = getattr(self, "_raw", None), None
        ctx = getattr(self, "_ctx", None)
        if raw is None or ctx is None:
            return
        if not ctx.alive:
            return
        self._dec_ref(ctx, raw)

    @property
    def released(self) -> bool:
        return self._raw is None

    def __del__(self) -> None:
        try:
            self.release()
        except (AttributeError, TypeError):
            # interpreter shutdown: module globals may already be gone
            pass

    def __enter__(self: H) -> H:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.release()

    def __copy__(self: H) -> H:
        return type(self)._adopt(self.get_context(), self.get_raw_handle())

    def __deepcopy__(self: H, memo: dict) -> H:
        return self.__copy__()

    # -- accessors -------------------------------------------------------

    def get_context(self) -> Context:
        """The owning context (borrowed)."""
        return self._ctx

    def get_raw_handle(self) -> Any:
        """The native handle, for passing to native calls only."""
        if self._raw is None:
            raise PreconditionError(f"{self.kind} handle used after release()")
        return self._raw

    def _ref(self) -> Any:
        return self._ctx.ref()
