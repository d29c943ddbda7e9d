"""
ast.py — Polymorphic term abstraction and concrete term kinds
=============================================================

``Ast`` is the capability every wrapped term implements:

* ``get_context()``     — the owning :class:`~z3shims.context.Context`;
* ``get_raw_handle()``  — the native handle, for native calls only;
* ``wrap(ctx, raw)``    — adopt a handle produced by a native call;
* ``eq`` / ``ne``       — build a *formula* stating (dis)equality.

Generic algorithms (vectors, algebraic numbers, polynomials, quantifier
elimination) accept any ``Ast`` and never look at the concrete kind.

Concrete kinds
--------------
``Bool``     propositional / first-order formulas
``Int``      integer terms
``Real``     real terms
``Float``    IEEE floating-point terms
``Dynamic``  terms of any sort, with checked conversions

Python ``==`` on two terms is structural identity of the native terms (same
hash-consed node), never a formula.  Use :meth:`Ast.eq` to build the
equality formula.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from fractions import Fraction
from typing import TYPE_CHECKING, Any, Optional, Sequence, Type, TypeVar, Union

from ._native import (
    ast_array,
    check_text,
    consts,
    core,
    empty_patterns,
    raw_handles,
)
from .context import Context, check_same_context
from .errors import PreconditionError
from .handle import NativeHandle

if TYPE_CHECKING:
    from .sort import Sort

logger = logging.getLogger(__name__)

__all__ = [
    "Ast",
    "Bool",
    "Int",
    "Real",
    "Float",
    "Dynamic",
    "forall",
    "exists",
    "wrap_inferred",
]

A = TypeVar("A", bound="Ast")

Numeric = Union[int, Fraction]


def _default_ctx(ctx: Optional[Context]) -> Context:
    return ctx if ctx is not None else Context.thread_local()


# ===================================================================
#  PART 1 — THE CAPABILITY
# ===================================================================

class Ast(NativeHandle, ABC):
    """A term owned by one context.  See the module docstring."""

    __slots__ = ()

    kind = "ast"

    def _inc_ref(self, ctx: Context, raw: Any) -> None:
        core.Z3_inc_ref(ctx.ref(), raw)

    def _dec_ref(self, ctx: Context, raw: Any) -> None:
        core.Z3_dec_ref(ctx.ref(), raw)

    @classmethod
    def wrap(cls: Type[A], ctx: Context, raw: Any) -> A:
        """Adopt *raw* as a term of this kind, taking one native reference.

        Unsafe at the boundary.  The caller attests that *raw*

        (a) is non-null,
        (b) was produced by, or is otherwise valid within, *ctx*,
        (c) has the sort this kind expects.

        Only (a) is checked.  A term of the wrong sort is not coerced; use
        ``Dynamic`` and its ``as_*`` conversions when the sort is unknown.
        """
        return cls._adopt(ctx, raw)

    @classmethod
    @abstractmethod
    def _coerce_literal(cls: Type[A], ctx: Context, value: Any) -> A:
        """Build a term of this kind from a Python literal."""

    def _operand(self, other: Any, operation: str) -> "Ast":
        if isinstance(other, Ast):
            check_same_context(self, other, operation=operation)
            return other
        return type(self)._coerce_literal(self._ctx, other)

    # -- formulas ------------------------------------------------------

    def eq(self, other: Any) -> "Bool":
        """The formula ``self = other`` (not a Python truth value)."""
        rhs = self._operand(other, "eq")
        return Bool.wrap(
            self._ctx,
            core.Z3_mk_eq(self._ref(), self.get_raw_handle(), rhs.get_raw_handle()),
        )

    def ne(self, other: Any) -> "Bool":
        """The formula ``not (self = other)``."""
        return self.eq(other).not_()

    # -- inspection ----------------------------------------------------

    def sort(self) -> "Sort":
        from .sort import Sort
        return Sort.wrap(self._ctx, core.Z3_get_sort(self._ref(), self.get_raw_handle()))

    def sort_kind(self) -> int:
        raw_sort = core.Z3_get_sort(self._ref(), self.get_raw_handle())
        return core.Z3_get_sort_kind(self._ref(), raw_sort)

    def is_numeral(self) -> bool:
        return core.Z3_is_numeral_ast(self._ref(), self.get_raw_handle())

    def simplify(self: A) -> A:
        return type(self).wrap(self._ctx, core.Z3_simplify(self._ref(), self.get_raw_handle()))

    def to_string(self) -> str:
        return core.Z3_ast_to_string(self._ref(), self.get_raw_handle())

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return self.to_string()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ast):
            return NotImplemented
        if other.get_context() != self._ctx:
            return False
        return core.Z3_is_eq_ast(self._ref(), self.get_raw_handle(), other.get_raw_handle())

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self) -> int:
        return core.Z3_get_ast_hash(self._ref(), self.get_raw_handle())

    def __bool__(self) -> bool:
        raise TypeError(
            "a term has no truth value; use eq()/ne() to build formulas "
            "and a Solver to decide them"
        )


def wrap_inferred(ctx: Context, raw: Any) -> Ast:
    """Wrap *raw* as the concrete kind matching its sort."""
    raw_sort = core.Z3_get_sort(ctx.ref(), raw)
    kind = core.Z3_get_sort_kind(ctx.ref(), raw_sort)
    cls = _KIND_BY_SORT.get(kind, Dynamic)
    return cls.wrap(ctx, raw)


# ===================================================================
#  PART 2 — BOOLEAN TERMS
# ===================================================================

class Bool(Ast):
    """Boolean-sorted term."""

    __slots__ = ()

    kind = "bool"

    @classmethod
    def new_const(cls, name: str, ctx: Optional[Context] = None) -> "Bool":
        ctx = _default_ctx(ctx)
        return cls.wrap(ctx, _mk_const(ctx, name, core.Z3_mk_bool_sort(ctx.ref())))

    @classmethod
    def from_bool(cls, value: bool, ctx: Optional[Context] = None) -> "Bool":
        ctx = _default_ctx(ctx)
        raw = core.Z3_mk_true(ctx.ref()) if value else core.Z3_mk_false(ctx.ref())
        return cls.wrap(ctx, raw)

    @classmethod
    def _coerce_literal(cls, ctx: Context, value: Any) -> "Bool":
        if isinstance(value, bool):
            return cls.from_bool(value, ctx)
        raise TypeError(f"cannot use {type(value).__name__} as a boolean term")

    def not_(self) -> "Bool":
        return Bool.wrap(self._ctx, core.Z3_mk_not(self._ref(), self.get_raw_handle()))

    def _connective(self, mk: Any, others: Sequence[Any], operation: str) -> "Bool":
        operands = [self] + [self._operand(o, operation) for o in others]
        arr = ast_array(raw_handles(operands))
        return Bool.wrap(self._ctx, mk(self._ref(), len(operands), arr))

    def and_(self, *others: Any) -> "Bool":
        return self._connective(core.Z3_mk_and, others, "and")

    def or_(self, *others: Any) -> "Bool":
        return self._connective(core.Z3_mk_or, others, "or")

    def implies(self, other: Any) -> "Bool":
        rhs = self._operand(other, "implies")
        return Bool.wrap(
            self._ctx,
            core.Z3_mk_implies(self._ref(), self.get_raw_handle(), rhs.get_raw_handle()),
        )

    def xor(self, other: Any) -> "Bool":
        rhs = self._operand(other, "xor")
        return Bool.wrap(
            self._ctx,
            core.Z3_mk_xor(self._ref(), self.get_raw_handle(), rhs.get_raw_handle()),
        )

    __invert__ = not_

    def __and__(self, other: Any) -> "Bool":
        return self.and_(other)

    def __or__(self, other: Any) -> "Bool":
        return self.or_(other)

    def __xor__(self, other: Any) -> "Bool":
        return self.xor(other)


def _quantifier(mk: Any, bound: Sequence[Ast], body: Bool, operation: str) -> Bool:
    if not bound:
        raise PreconditionError(f"{operation}: at least one bound variable is required")
    ctx = check_same_context(body, *bound, operation=operation)
    raw = mk(
        ctx.ref(),
        0,
        len(bound),
        ast_array(raw_handles(bound)),
        0,
        empty_patterns(),
        body.get_raw_handle(),
    )
    return Bool.wrap(ctx, raw)


def forall(bound: Sequence[Ast], body: Bool) -> Bool:
    """Universally quantify the constants in *bound* over *body*."""
    return _quantifier(core.Z3_mk_forall_const, bound, body, "forall")


def exists(bound: Sequence[Ast], body: Bool) -> Bool:
    """Existentially quantify the constants in *bound* over *body*."""
    return _quantifier(core.Z3_mk_exists_const, bound, body, "exists")


# ===================================================================
#  PART 3 — ARITHMETIC TERMS
# ===================================================================

class _Arith(Ast):
    """Operations shared by ``Int`` and ``Real``."""

    __slots__ = ()

    def _nary(self, mk: Any, other: Any, operation: str, swap: bool = False) -> Ast:
        rhs = self._operand(other, operation)
        operands = [rhs, self] if swap else [self, rhs]
        arr = ast_array(raw_handles(operands))
        return wrap_inferred(self._ctx, mk(self._ref(), 2, arr))

    def _binary(self, mk: Any, other: Any, operation: str, swap: bool = False) -> Ast:
        rhs = self._operand(other, operation)
        a, b = (rhs, self) if swap else (self, rhs)
        return wrap_inferred(self._ctx, mk(self._ref(), a.get_raw_handle(), b.get_raw_handle()))

    def _compare(self, mk: Any, other: Any, operation: str) -> Bool:
        rhs = self._operand(other, operation)
        return Bool.wrap(self._ctx, mk(self._ref(), self.get_raw_handle(), rhs.get_raw_handle()))

    def __add__(self, other: Any) -> Ast:
        return self._nary(core.Z3_mk_add, other, "add")

    def __radd__(self, other: Any) -> Ast:
        return self._nary(core.Z3_mk_add, other, "add", swap=True)

    def __sub__(self, other: Any) -> Ast:
        return self._nary(core.Z3_mk_sub, other, "sub")

    def __rsub__(self, other: Any) -> Ast:
        return self._nary(core.Z3_mk_sub, other, "sub", swap=True)

    def __mul__(self, other: Any) -> Ast:
        return self._nary(core.Z3_mk_mul, other, "mul")

    def __rmul__(self, other: Any) -> Ast:
        return self._nary(core.Z3_mk_mul, other, "mul", swap=True)

    def __neg__(self) -> Ast:
        return wrap_inferred(self._ctx, core.Z3_mk_unary_minus(self._ref(), self.get_raw_handle()))

    def lt(self, other: Any) -> Bool:
        return self._compare(core.Z3_mk_lt, other, "lt")

    def le(self, other: Any) -> Bool:
        return self._compare(core.Z3_mk_le, other, "le")

    def gt(self, other: Any) -> Bool:
        return self._compare(core.Z3_mk_gt, other, "gt")

    def ge(self, other: Any) -> Bool:
        return self._compare(core.Z3_mk_ge, other, "ge")

    def _numeral_string(self) -> Optional[str]:
        if not self.is_numeral():
            return None
        return core.Z3_get_numeral_string(self._ref(), self.get_raw_handle())


class Int(_Arith):
    """Integer-sorted term."""

    __slots__ = ()

    kind = "int"

    @classmethod
    def new_const(cls, name: str, ctx: Optional[Context] = None) -> "Int":
        ctx = _default_ctx(ctx)
        return cls.wrap(ctx, _mk_const(ctx, name, core.Z3_mk_int_sort(ctx.ref())))

    @classmethod
    def from_int(cls, value: int, ctx: Optional[Context] = None) -> "Int":
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"expected int, got {type(value).__name__}")
        ctx = _default_ctx(ctx)
        raw = core.Z3_mk_numeral(ctx.ref(), str(value), core.Z3_mk_int_sort(ctx.ref()))
        return cls.wrap(ctx, raw)

    @classmethod
    def _coerce_literal(cls, ctx: Context, value: Any) -> "Int":
        return cls.from_int(value, ctx)

    def to_real(self) -> "Real":
        return Real.wrap(self._ctx, core.Z3_mk_int2real(self._ref(), self.get_raw_handle()))

    def as_int(self) -> Optional[int]:
        """Value of an integer numeral, ``None`` for any other term."""
        text = self._numeral_string()
        return int(text) if text is not None else None


class Real(_Arith):
    """Real-sorted term."""

    __slots__ = ()

    kind = "real"

    @classmethod
    def new_const(cls, name: str, ctx: Optional[Context] = None) -> "Real":
        ctx = _default_ctx(ctx)
        return cls.wrap(ctx, _mk_const(ctx, name, core.Z3_mk_real_sort(ctx.ref())))

    @classmethod
    def from_rational(
        cls,
        numerator: Numeric,
        denominator: int = 1,
        ctx: Optional[Context] = None,
    ) -> "Real":
        value = Fraction(numerator, denominator)
        ctx = _default_ctx(ctx)
        raw = core.Z3_mk_numeral(ctx.ref(), str(value), core.Z3_mk_real_sort(ctx.ref()))
        return cls.wrap(ctx, raw)

    @classmethod
    def from_int(cls, value: int, ctx: Optional[Context] = None) -> "Real":
        return cls.from_rational(value, 1, ctx)

    @classmethod
    def _coerce_literal(cls, ctx: Context, value: Any) -> "Real":
        if isinstance(value, bool):
            raise TypeError("cannot use bool as a real term")
        if isinstance(value, float):
            value = Fraction(value)
        if isinstance(value, (int, Fraction)):
            return cls.from_rational(value, 1, ctx)
        raise TypeError(f"cannot use {type(value).__name__} as a real term")

    def __truediv__(self, other: Any) -> Ast:
        return self._binary(core.Z3_mk_div, other, "div")

    def __rtruediv__(self, other: Any) -> Ast:
        return self._binary(core.Z3_mk_div, other, "div", swap=True)

    def as_fraction(self) -> Optional[Fraction]:
        """Value of a rational numeral, ``None`` for any other term."""
        text = self._numeral_string()
        return Fraction(text) if text is not None else None

    def as_decimal(self, precision: int = 10) -> str:
        """Decimal rendering of a numeral or algebraic number ('?' marks truncation)."""
        return core.Z3_get_numeral_decimal_string(self._ref(), self.get_raw_handle(), precision)


# ===================================================================
#  PART 4 — FLOATING-POINT TERMS
# ===================================================================

class Float(Ast):
    """IEEE floating-point term.  Arithmetic rounds to nearest, ties to even."""

    __slots__ = ()

    kind = "float"

    @staticmethod
    def _sort(ctx: Context, ebits: int, sbits: int) -> Any:
        return core.Z3_mk_fpa_sort(ctx.ref(), ebits, sbits)

    @classmethod
    def new_const(
        cls,
        name: str,
        ebits: int = 11,
        sbits: int = 53,
        ctx: Optional[Context] = None,
    ) -> "Float":
        ctx = _default_ctx(ctx)
        return cls.wrap(ctx, _mk_const(ctx, name, cls._sort(ctx, ebits, sbits)))

    @classmethod
    def from_float(
        cls,
        value: float,
        ebits: int = 11,
        sbits: int = 53,
        ctx: Optional[Context] = None,
    ) -> "Float":
        ctx = _default_ctx(ctx)
        raw = core.Z3_mk_fpa_numeral_double(ctx.ref(), float(value), cls._sort(ctx, ebits, sbits))
        return cls.wrap(ctx, raw)

    @classmethod
    def _coerce_literal(cls, ctx: Context, value: Any) -> "Float":
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"cannot use {type(value).__name__} as a floating-point term")
        return cls.from_float(value, ctx=ctx)

    def _operand(self, other: Any, operation: str) -> Ast:
        if isinstance(other, Ast):
            return super()._operand(other, operation)
        return Float.from_float(other, self.ebits(), self.sbits(), self._ctx)

    def ebits(self) -> int:
        return core.Z3_fpa_get_ebits(self._ref(), core.Z3_get_sort(self._ref(), self.get_raw_handle()))

    def sbits(self) -> int:
        return core.Z3_fpa_get_sbits(self._ref(), core.Z3_get_sort(self._ref(), self.get_raw_handle()))

    def _rounded(self, mk: Any, other: Any, operation: str) -> "Float":
        rhs = self._operand(other, operation)
        rm = core.Z3_mk_fpa_round_nearest_ties_to_even(self._ref())
        raw = mk(self._ref(), rm, self.get_raw_handle(), rhs.get_raw_handle())
        return Float.wrap(self._ctx, raw)

    def __add__(self, other: Any) -> "Float":
        return self._rounded(core.Z3_mk_fpa_add, other, "fp.add")

    def __sub__(self, other: Any) -> "Float":
        return self._rounded(core.Z3_mk_fpa_sub, other, "fp.sub")

    def __mul__(self, other: Any) -> "Float":
        return self._rounded(core.Z3_mk_fpa_mul, other, "fp.mul")

    def __truediv__(self, other: Any) -> "Float":
        return self._rounded(core.Z3_mk_fpa_div, other, "fp.div")

    def __neg__(self) -> "Float":
        return Float.wrap(self._ctx, core.Z3_mk_fpa_neg(self._ref(), self.get_raw_handle()))

    def lt(self, other: Any) -> Bool:
        rhs = self._operand(other, "fp.lt")
        return Bool.wrap(
            self._ctx,
            core.Z3_mk_fpa_lt(self._ref(), self.get_raw_handle(), rhs.get_raw_handle()),
        )

    def gt(self, other: Any) -> Bool:
        rhs = self._operand(other, "fp.gt")
        return Bool.wrap(
            self._ctx,
            core.Z3_mk_fpa_gt(self._ref(), self.get_raw_handle(), rhs.get_raw_handle()),
        )

    def is_nan(self) -> Bool:
        return Bool.wrap(self._ctx, core.Z3_mk_fpa_is_nan(self._ref(), self.get_raw_handle()))


# ===================================================================
#  PART 5 — DYNAMICALLY-SORTED TERMS
# ===================================================================

class Dynamic(Ast):
    """A term of any sort.  Vector elements come back as ``Dynamic``."""

    __slots__ = ()

    kind = "dynamic"

    @classmethod
    def from_ast(cls, node: Ast) -> "Dynamic":
        """A second owner of *node*'s term, viewed without a static sort."""
        return cls.wrap(node.get_context(), node.get_raw_handle())

    @classmethod
    def _coerce_literal(cls, ctx: Context, value: Any) -> "Dynamic":
        raise TypeError("a dynamically-sorted term cannot be built from a Python literal")

    def _as(self, cls: Type[A], sort_kind: int) -> Optional[A]:
        if self.sort_kind() != sort_kind:
            return None
        return cls.wrap(self._ctx, self.get_raw_handle())

    def as_bool(self) -> Optional[Bool]:
        return self._as(Bool, consts.Z3_BOOL_SORT)

    def as_int(self) -> Optional[Int]:
        return self._as(Int, consts.Z3_INT_SORT)

    def as_real(self) -> Optional[Real]:
        return self._as(Real, consts.Z3_REAL_SORT)

    def as_float(self) -> Optional[Float]:
        return self._as(Float, consts.Z3_FLOATING_POINT_SORT)


_KIND_BY_SORT = {
    consts.Z3_BOOL_SORT: Bool,
    consts.Z3_INT_SORT: Int,
    consts.Z3_REAL_SORT: Real,
    consts.Z3_FLOATING_POINT_SORT: Float,
}


def _mk_const(ctx: Context, name: str, raw_sort: Any) -> Any:
    symbol = core.Z3_mk_string_symbol(ctx.ref(), check_text(name, "constant name"))
    return core.Z3_mk_const(ctx.ref(), symbol, raw_sort)
