"""
polynomial.py — Polynomial operations over arithmetic terms
"""

from __future__ import annotations

from ._native import core
from .ast import Ast
from .ast_vector import AstVector
from .context import check_same_context

__all__ = ["Polynomial"]


class Polynomial:
    """Namespace for polynomial operations."""

    @staticmethod
    def subresultants(p: Ast, q: Ast, x: Ast) -> AstVector:
        """Nonzero subresultants of *p* and *q* with respect to *x*.

        *p* and *q* are arithmetic terms read as polynomials in *x*.  Any
        subterm that is not polynomial structure is an opaque variable: in
        ``f(a)*f(a) + 2*f(a) + 1`` the term ``f(a)`` is a variable.

        Count and order of the result are whatever the engine's elimination
        procedure yields; index 0 comes first.
        """
        ctx = check_same_context(p, q, x, operation="Polynomial.subresultants")
        raw = core.Z3_polynomial_subresultants(
            ctx.ref(), p.get_raw_handle(), q.get_raw_handle(), x.get_raw_handle()
        )
        return AstVector.wrap(ctx, raw)
