"""
ast_vector.py — Reference-counted vector of terms
=================================================

``AstVector`` owns one native vector handle.  Its length is always read from
the native side: a resize issued through any path is visible immediately,
and iteration re-reads the length on every step.

Elements come back as ``Dynamic`` terms; use the ``as_*`` conversions to
recover a static kind.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator, List, Optional

from ._native import core
from .ast import Ast, Dynamic, _default_ctx
from .context import Context, check_same_context
from .errors import PreconditionError, VectorIndexError
from .handle import NativeHandle

logger = logging.getLogger(__name__)

__all__ = ["AstVector", "AstVectorIter"]


class AstVector(NativeHandle):
    """Ordered, mutable container of terms owned by one context."""

    __slots__ = ()

    kind = "ast_vector"

    def __init__(self, ctx: Optional[Context] = None) -> None:
        super().__init__()
        ctx = _default_ctx(ctx)
        self._own(ctx, core.Z3_mk_ast_vector(ctx.ref()))

    def _inc_ref(self, ctx: Context, raw: Any) -> None:
        core.Z3_ast_vector_inc_ref(ctx.ref(), raw)

    def _dec_ref(self, ctx: Context, raw: Any) -> None:
        core.Z3_ast_vector_dec_ref(ctx.ref(), raw)

    @classmethod
    def wrap(cls, ctx: Context, raw: Any) -> "AstVector":
        """Adopt a vector handle returned by a native call on *ctx*.

        Takes its own reference; the caller keeps whatever it held.
        """
        return cls._adopt(ctx, raw)

    @classmethod
    def from_slice(cls, nodes: Iterable[Ast], ctx: Optional[Context] = None) -> "AstVector":
        """A new vector holding *nodes* in order."""
        nodes = list(nodes)
        if ctx is None and nodes:
            ctx = nodes[0].get_context()
        vector = cls(ctx)
        for node in nodes:
            vector.push(node)
        return vector

    # -- size ------------------------------------------------------------

    def len(self) -> int:
        return core.Z3_ast_vector_size(self._ref(), self.get_raw_handle())

    def __len__(self) -> int:
        return self.len()

    def is_empty(self) -> bool:
        return self.len() == 0

    def _check_index(self, index: int) -> None:
        length = self.len()
        if isinstance(index, bool) or not isinstance(index, int):
            raise TypeError(f"vector index must be int, got {type(index).__name__}")
        if index < 0 or index >= length:
            raise VectorIndexError(index, length)

    # -- element access ----------------------------------------------------

    def get(self, index: int) -> Dynamic:
        """Element at *index*.  Slots added by :meth:`resize` must be set first."""
        self._check_index(index)
        raw = core.Z3_ast_vector_get(self._ref(), self.get_raw_handle(), index)
        return Dynamic.wrap(self._ctx, raw)

    def set(self, index: int, node: Ast) -> None:
        self._check_index(index)
        check_same_context(self, node, operation="AstVector.set")
        core.Z3_ast_vector_set(self._ref(), self.get_raw_handle(), index, node.get_raw_handle())

    def push(self, node: Ast) -> None:
        check_same_context(self, node, operation="AstVector.push")
        core.Z3_ast_vector_push(self._ref(), self.get_raw_handle(), node.get_raw_handle())

    def resize(self, new_size: int) -> None:
        """Grow or truncate to *new_size* elements.

        Grown slots hold no term and must not be read before being set.
        """
        if new_size < 0:
            raise PreconditionError(f"cannot resize a vector to {new_size} elements")
        core.Z3_ast_vector_resize(self._ref(), self.get_raw_handle(), new_size)

    def __getitem__(self, index: int) -> Dynamic:
        return self.get(index)

    def __setitem__(self, index: int, node: Ast) -> None:
        self.set(index, node)

    def __iter__(self) -> "AstVectorIter":
        return AstVectorIter(self)

    def to_vec(self) -> List[Dynamic]:
        return list(self)

    # -- cross-context ---------------------------------------------------

    def translate(self, target: Context) -> "AstVector":
        """A new vector registered in *target* holding this vector's terms.

        Elements are rebuilt by the native translator.  Translating into this
        vector's own context copies the elements into a fresh native vector,
        so the result never aliases the source.
        """
        if target == self._ctx:
            return AstVector.from_slice(self, self._ctx)
        raw = core.Z3_ast_vector_translate(self._ref(), self.get_raw_handle(), target.ref())
        logger.debug("translated vector of %d element(s) into %r", self.len(), target)
        return AstVector.wrap(target, raw)

    # -- rendering -------------------------------------------------------

    def to_string(self) -> str:
        """Native rendering.  Debug output only; the format is not stable."""
        return core.Z3_ast_vector_to_string(self._ref(), self.get_raw_handle())

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"AstVector({self.to_string()})"


class AstVectorIter:
    """Single pass over a vector by index, re-reading the length each step."""

    __slots__ = ("_vector", "_index")

    def __init__(self, vector: AstVector) -> None:
        self._vector = vector
        self._index = 0

    def __iter__(self) -> "AstVectorIter":
        return self

    def __next__(self) -> Dynamic:
        if self._index >= self._vector.len():
            raise StopIteration
        item = self._vector.get(self._index)
        self._index += 1
        return item
