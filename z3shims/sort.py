"""
sort.py — Sorts and function declarations
=========================================

Sorts and declarations are native ASTs too; their counted references go
through the generic ``Z3_inc_ref`` / ``Z3_dec_ref`` after conversion to an
AST handle.  ``FuncDecl`` is what rule solving calls a *relation*: a
declaration with a boolean range.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from ._native import ast_array, check_text, consts, core, raw_handles, sort_array
from .ast import Ast, _default_ctx, wrap_inferred
from .context import Context, check_same_context
from .errors import PreconditionError
from .handle import NativeHandle

__all__ = ["Sort", "FuncDecl"]


class Sort(NativeHandle):
    """The sort of a term."""

    __slots__ = ()

    kind = "sort"

    def _inc_ref(self, ctx: Context, raw: Any) -> None:
        core.Z3_inc_ref(ctx.ref(), core.Z3_sort_to_ast(ctx.ref(), raw))

    def _dec_ref(self, ctx: Context, raw: Any) -> None:
        core.Z3_dec_ref(ctx.ref(), core.Z3_sort_to_ast(ctx.ref(), raw))

    @classmethod
    def wrap(cls, ctx: Context, raw: Any) -> "Sort":
        return cls._adopt(ctx, raw)

    @classmethod
    def bool(cls, ctx: Optional[Context] = None) -> "Sort":
        ctx = _default_ctx(ctx)
        return cls.wrap(ctx, core.Z3_mk_bool_sort(ctx.ref()))

    @classmethod
    def int(cls, ctx: Optional[Context] = None) -> "Sort":
        ctx = _default_ctx(ctx)
        return cls.wrap(ctx, core.Z3_mk_int_sort(ctx.ref()))

    @classmethod
    def real(cls, ctx: Optional[Context] = None) -> "Sort":
        ctx = _default_ctx(ctx)
        return cls.wrap(ctx, core.Z3_mk_real_sort(ctx.ref()))

    @classmethod
    def float(cls, ebits: int = 11, sbits: int = 53, ctx: Optional[Context] = None) -> "Sort":
        ctx = _default_ctx(ctx)
        return cls.wrap(ctx, core.Z3_mk_fpa_sort(ctx.ref(), ebits, sbits))

    def sort_kind(self) -> int:
        return core.Z3_get_sort_kind(self._ref(), self.get_raw_handle())

    def is_bool(self) -> bool:
        return self.sort_kind() == consts.Z3_BOOL_SORT

    def name(self) -> str:
        return core.Z3_get_symbol_string(
            self._ref(), core.Z3_get_sort_name(self._ref(), self.get_raw_handle())
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Sort):
            return NotImplemented
        if other.get_context() != self._ctx:
            return False
        return core.Z3_is_eq_sort(self._ref(), self.get_raw_handle(), other.get_raw_handle())

    def __hash__(self) -> int:
        return core.Z3_get_ast_hash(self._ref(), core.Z3_sort_to_ast(self._ref(), self.get_raw_handle()))

    def __str__(self) -> str:
        return core.Z3_sort_to_string(self._ref(), self.get_raw_handle())

    __repr__ = __str__


class FuncDecl(NativeHandle):
    """An uninterpreted function symbol; a relation when its range is Bool."""

    __slots__ = ()

    kind = "func_decl"

    def _inc_ref(self, ctx: Context, raw: Any) -> None:
        core.Z3_inc_ref(ctx.ref(), core.Z3_func_decl_to_ast(ctx.ref(), raw))

    def _dec_ref(self, ctx: Context, raw: Any) -> None:
        core.Z3_dec_ref(ctx.ref(), core.Z3_func_decl_to_ast(ctx.ref(), raw))

    @classmethod
    def wrap(cls, ctx: Context, raw: Any) -> "FuncDecl":
        return cls._adopt(ctx, raw)

    @classmethod
    def new(
        cls,
        name: str,
        domain: Sequence[Sort],
        range_: Sort,
    ) -> "FuncDecl":
        ctx = check_same_context(range_, *domain, operation="FuncDecl.new")
        symbol = core.Z3_mk_string_symbol(ctx.ref(), check_text(name, "declaration name"))
        raw = core.Z3_mk_func_decl(
            ctx.ref(),
            symbol,
            len(domain),
            sort_array(raw_handles(domain)),
            range_.get_raw_handle(),
        )
        return cls.wrap(ctx, raw)

    @classmethod
    def relation(
        cls,
        name: str,
        domain: Sequence[Sort] = (),
        ctx: Optional[Context] = None,
    ) -> "FuncDecl":
        """A boolean-valued declaration over *domain*."""
        if domain:
            ctx = domain[0].get_context()
        return cls.new(name, domain, Sort.bool(_default_ctx(ctx)))

    @classmethod
    def of(cls, application: Ast) -> "FuncDecl":
        """Declaration at the head of an application term."""
        ref = application.get_context().ref()
        raw = application.get_raw_handle()
        if not core.Z3_is_app(ref, raw):
            raise PreconditionError(f"{application} is not an application")
        return cls.wrap(
            application.get_context(),
            core.Z3_get_app_decl(ref, core.Z3_to_app(ref, raw)),
        )

    def name(self) -> str:
        return core.Z3_get_symbol_string(
            self._ref(), core.Z3_get_decl_name(self._ref(), self.get_raw_handle())
        )

    def arity(self) -> int:
        return core.Z3_get_arity(self._ref(), self.get_raw_handle())

    def range(self) -> Sort:
        return Sort.wrap(self._ctx, core.Z3_get_range(self._ref(), self.get_raw_handle()))

    def apply(self, *args: Ast) -> Ast:
        """The application term ``self(args...)``, typed by the range sort."""
        if len(args) != self.arity():
            raise PreconditionError(
                f"{self.name()} expects {self.arity()} argument(s), got {len(args)}"
            )
        if args:
            check_same_context(self, *args, operation=f"apply {self.name()}")
        raw = core.Z3_mk_app(
            self._ref(), self.get_raw_handle(), len(args), ast_array(raw_handles(args))
        )
        return wrap_inferred(self._ctx, raw)

    def __call__(self, *args: Ast) -> Ast:
        return self.apply(*args)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FuncDecl):
            return NotImplemented
        if other.get_context() != self._ctx:
            return False
        return core.Z3_is_eq_func_decl(self._ref(), self.get_raw_handle(), other.get_raw_handle())

    def __hash__(self) -> int:
        return core.Z3_get_ast_hash(
            self._ref(), core.Z3_func_decl_to_ast(self._ref(), self.get_raw_handle())
        )

    def __str__(self) -> str:
        return core.Z3_func_decl_to_string(self._ref(), self.get_raw_handle())

    __repr__ = __str__

