"""
algebraic.py — Real algebraic number arithmetic
===============================================

Operations of the engine's real algebraic number package over any pair of
terms.  Operands are plain ``Ast`` values (typically rational numerals from
``Real.from_rational`` or results of earlier algebraic operations); results
are freshly wrapped ``Real`` terms.

Preconditions
-------------
Every operand must already be an algebraic *value*.  The engine does not
check this cheaply and misbehaves when it is violated, so the fast entry
points here do not check either.  Call :meth:`Algebraic.is_value` first, or
build operands through :meth:`Algebraic.checked`, which pays one extra native
round trip to verify.

Operand contexts *are* checked: mixing contexts raises
``ContextMismatchError`` before any native call.
"""

from __future__ import annotations

from typing import Any, Callable

from ._native import core
from .ast import Ast, Real
from .context import Context, check_same_context
from .errors import PreconditionError

__all__ = ["Algebraic"]


def _binary(name: str, fn: Callable[..., Any], a: Ast, b: Ast) -> Real:
    ctx = check_same_context(a, b, operation=f"Algebraic.{name}")
    return Real.wrap(ctx, fn(ctx.ref(), a.get_raw_handle(), b.get_raw_handle()))


def _compare(name: str, fn: Callable[..., bool], a: Ast, b: Ast) -> bool:
    ctx = check_same_context(a, b, operation=f"Algebraic.{name}")
    return bool(fn(ctx.ref(), a.get_raw_handle(), b.get_raw_handle()))


def _positive_exponent(k: int, operation: str) -> int:
    if isinstance(k, bool) or not isinstance(k, int):
        raise TypeError(f"{operation}: k must be int, got {type(k).__name__}")
    if k <= 0:
        raise PreconditionError(f"{operation}: k must be positive, got {k}")
    return k


class Algebraic(Ast):
    """A real term known (or attested) to be an algebraic number value."""

    __slots__ = ()

    kind = "algebraic"

    @classmethod
    def _coerce_literal(cls, ctx: Context, value: Any) -> "Algebraic":
        return cls.wrap(ctx, Real._coerce_literal(ctx, value).get_raw_handle())

    @staticmethod
    def is_value(node: Ast) -> bool:
        """True when *node* is a value of the algebraic number package."""
        return bool(core.Z3_algebraic_is_value(node.get_context().ref(), node.get_raw_handle()))

    @classmethod
    def checked(cls, node: Ast) -> "Algebraic":
        """View *node* as an algebraic value, verifying it first."""
        if not cls.is_value(node):
            raise PreconditionError(
                f"{node} is not an algebraic number value",
                hint="only numerals and results of algebraic operations qualify",
            )
        return cls.wrap(node.get_context(), node.get_raw_handle())

    @classmethod
    def unchecked(cls, node: Ast) -> "Algebraic":
        """View *node* as an algebraic value without verifying it."""
        return cls.wrap(node.get_context(), node.get_raw_handle())

    # -- predicates (precondition: is_value) --------------------------

    def is_positive(self) -> bool:
        return bool(core.Z3_algebraic_is_pos(self._ref(), self.get_raw_handle()))

    def is_negative(self) -> bool:
        return bool(core.Z3_algebraic_is_neg(self._ref(), self.get_raw_handle()))

    def is_zero(self) -> bool:
        return bool(core.Z3_algebraic_is_zero(self._ref(), self.get_raw_handle()))

    def sign(self) -> int:
        """-1, 0 or 1."""
        return core.Z3_algebraic_sign(self._ref(), self.get_raw_handle())

    def as_decimal(self, precision: int = 10) -> str:
        return core.Z3_get_numeral_decimal_string(self._ref(), self.get_raw_handle(), precision)

    # -- arithmetic ----------------------------------------------------------

    @staticmethod
    def add(a: Ast, b: Ast) -> Real:
        return _binary("add", core.Z3_algebraic_add, a, b)

    @staticmethod
    def sub(a: Ast, b: Ast) -> Real:
        return _binary("sub", core.Z3_algebraic_sub, a, b)

    @staticmethod
    def mul(a: Ast, b: Ast) -> Real:
        return _binary("mul", core.Z3_algebraic_mul, a, b)

    @staticmethod
    def div(a: Ast, b: Ast) -> Real:
        """``a / b``.  *b* must be non-zero."""
        return _binary("div", core.Z3_algebraic_div, a, b)

    def root(self, k: int) -> Real:
        """The k-th root; ``k > 0``, and for even *k* the value must be non-negative."""
        k = _positive_exponent(k, "Algebraic.root")
        return Real.wrap(self._ctx, core.Z3_algebraic_root(self._ref(), self.get_raw_handle(), k))

    def power(self, k: int) -> Real:
        k = _positive_exponent(k, "Algebraic.power")
        return Real.wrap(self._ctx, core.Z3_algebraic_power(self._ref(), self.get_raw_handle(), k))

    # -- comparisons ---------------------------------------------------------

    @staticmethod
    def lt(a: Ast, b: Ast) -> bool:
        return _compare("lt", core.Z3_algebraic_lt, a, b)

    @staticmethod
    def gt(a: Ast, b: Ast) -> bool:
        return _compare("gt", core.Z3_algebraic_gt, a, b)

    @staticmethod
    def le(a: Ast, b: Ast) -> bool:
        return _compare("le", core.Z3_algebraic_le, a, b)

    @staticmethod
    def ge(a: Ast, b: Ast) -> bool:
        return _compare("ge", core.Z3_algebraic_ge, a, b)

    @staticmethod
    def eq_algebraic(a: Ast, b: Ast) -> bool:
        return _compare("eq", core.Z3_algebraic_eq, a, b)

    @staticmethod
    def neq(a: Ast, b: Ast) -> bool:
        return _compare("neq", core.Z3_algebraic_neq, a, b)
