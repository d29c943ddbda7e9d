"""
fixedpoint.py — Horn-clause rule solving
========================================

A ``Fixedpoint`` accumulates relations, rules, facts and background axioms,
then answers derivability queries over them.  State only grows: nothing
added can be removed, and a query is a pure read of what has been added, so
the same query may be repeated.

Typical use::

    fp = Fixedpoint(ctx)
    p = FuncDecl.relation("p", ctx=ctx)
    q = FuncDecl.relation("q", ctx=ctx)
    fp.register_relation(p, q)
    fp.add_fact(p, [])
    fp.add_rule(p().implies(q()))
    fp.query(q())                 # QueryResult.DERIVABLE

Absent diagnostics (no answer, no cover) are ``None``, never a placeholder
term.  Textual round trips go through :meth:`Fixedpoint.to_string` and
:meth:`Fixedpoint.from_string`; the text format is the engine's own and is
meant for inspection.
"""

from __future__ import annotations

import enum
import logging
from pathlib import Path
from typing import Any, Optional, Sequence, Union

from ._native import (
    Z3Exception,
    ast_array,
    check_text,
    consts,
    core,
    decl_array,
    exception_message,
    is_null,
    raw_handles,
)
from .ast import Ast, Bool, _default_ctx
from .ast_vector import AstVector
from .context import Context, check_same_context
from .errors import PreconditionError, RuleFileError, RuleParseError
from .handle import NativeHandle
from .sort import FuncDecl
from .statistics import Params, Statistics

logger = logging.getLogger(__name__)

__all__ = ["QueryResult", "Fixedpoint"]


class QueryResult(enum.Enum):
    """Outcome of a derivability query."""
    DERIVABLE = "derivable"             # the goal follows from the rules
    NOT_DERIVABLE = "not_derivable"     # proven not to follow
    UNKNOWN = "unknown"                 # engine gave up; see get_reason_unknown()

    @classmethod
    def from_lbool(cls, value: int) -> "QueryResult":
        if value == consts.Z3_L_TRUE:
            return cls.DERIVABLE
        if value == consts.Z3_L_FALSE:
            return cls.NOT_DERIVABLE
        return cls.UNKNOWN


class Fixedpoint(NativeHandle):
    """Stateful rule-solving context."""

    __slots__ = ()

    kind = "fixedpoint"

    def __init__(self, ctx: Optional[Context] = None) -> None:
        super().__init__()
        ctx = _default_ctx(ctx)
        self._own(ctx, core.Z3_mk_fixedpoint(ctx.ref()))

    def _inc_ref(self, ctx: Context, raw: Any) -> None:
        core.Z3_fixedpoint_inc_ref(ctx.ref(), raw)

    def _dec_ref(self, ctx: Context, raw: Any) -> None:
        core.Z3_fixedpoint_dec_ref(ctx.ref(), raw)

    def __copy__(self) -> "Fixedpoint":
        raise TypeError("a Fixedpoint is stateful and cannot be copied; share the object instead")

    def _symbol(self, name: Optional[str]) -> Any:
        return core.Z3_mk_string_symbol(self._ref(), check_text(name or "", "rule name"))

    # -- accumulating state ----------------------------------------------

    def register_relation(self, *decls: FuncDecl) -> None:
        """Declare *decls* as relations whose extension the engine computes."""
        if decls:
            check_same_context(self, *decls, operation="Fixedpoint.register_relation")
        for decl in decls:
            core.Z3_fixedpoint_register_relation(self._ref(), self.get_raw_handle(), decl.get_raw_handle())

    def add_rule(self, rule: Ast, name: Optional[str] = None) -> None:
        """Add a Horn clause; *name* allows a later :meth:`update_rule`.

        Variables must be bound with ``forall``; free constants stay constants.
        """
        check_same_context(self, rule, operation="Fixedpoint.add_rule")
        core.Z3_fixedpoint_add_rule(self._ref(), self.get_raw_handle(), rule.get_raw_handle(), self._symbol(name))

    def update_rule(self, rule: Ast, name: str) -> None:
        """Replace the rule previously added under *name*."""
        check_same_context(self, rule, operation="Fixedpoint.update_rule")
        core.Z3_fixedpoint_update_rule(self._ref(), self.get_raw_handle(), rule.get_raw_handle(), self._symbol(name))

    def add_fact(self, pred: FuncDecl, args: Sequence[Ast] = ()) -> None:
        """Assert the ground fact ``pred(args...)``."""
        args = list(args)
        check_same_context(self, pred, *args, operation="Fixedpoint.add_fact")
        if not pred.range().is_bool():
            raise PreconditionError(f"{pred.name()} is not a relation (its range is {pred.range()})")
        fact = pred.apply(*args)
        core.Z3_fixedpoint_add_rule(self._ref(), self.get_raw_handle(), fact.get_raw_handle(), self._symbol(None))

    def assert_(self, axiom: Ast) -> None:
        """Add a background axiom (no relation in it may be a registered one)."""
        check_same_context(self, axiom, operation="Fixedpoint.assert")
        core.Z3_fixedpoint_assert(self._ref(), self.get_raw_handle(), axiom.get_raw_handle())

    # -- queries ---------------------------------------------------------

    def query(self, goal: Ast) -> QueryResult:
        """Is *goal* derivable from the accumulated rules?"""
        check_same_context(self, goal, operation="Fixedpoint.query")
        value = core.Z3_fixedpoint_query(self._ref(), self.get_raw_handle(), goal.get_raw_handle())
        result = QueryResult.from_lbool(value)
        logger.debug("query %s: %s", goal, result.value)
        return result

    def query_relations(self, decls: Sequence[FuncDecl]) -> QueryResult:
        """Is any tuple of any relation in *decls* derivable?"""
        decls = list(decls)
        if not decls:
            raise PreconditionError("query_relations needs at least one relation")
        check_same_context(self, *decls, operation="Fixedpoint.query_relations")
        value = core.Z3_fixedpoint_query_relations(
            self._ref(), self.get_raw_handle(), len(decls), decl_array(raw_handles(decls))
        )
        return QueryResult.from_lbool(value)

    def _optional_formula(self, what: str, fn: Any, *args: Any) -> Optional[Bool]:
        try:
            raw = fn(self._ref(), self.get_raw_handle(), *args)
        except Z3Exception as exc:
            logger.debug("no %s available: %s", what, exception_message(exc))
            return None
        if is_null(raw):
            logger.debug("no %s available", what)
            return None
        return Bool.wrap(self._ctx, raw)

    def get_answer(self) -> Optional[Bool]:
        """Witness of the last query, or ``None`` when the engine has none."""
        return self._optional_formula("answer", core.Z3_fixedpoint_get_answer)

    def get_reason_unknown(self) -> str:
        """Why the last query was ``UNKNOWN``.  Unspecified text otherwise."""
        return core.Z3_fixedpoint_get_reason_unknown(self._ref(), self.get_raw_handle())

    # -- level-based engines ---------------------------------------------

    def get_num_levels(self, pred: FuncDecl) -> int:
        check_same_context(self, pred, operation="Fixedpoint.get_num_levels")
        return core.Z3_fixedpoint_get_num_levels(self._ref(), self.get_raw_handle(), pred.get_raw_handle())

    def get_cover_delta(self, level: int, pred: FuncDecl) -> Optional[Bool]:
        """Over-approximation of *pred* learned at *level* (-1 for the limit)."""
        check_same_context(self, pred, operation="Fixedpoint.get_cover_delta")
        return self._optional_formula(
            f"cover at level {level}", core.Z3_fixedpoint_get_cover_delta, level, pred.get_raw_handle()
        )

    def add_cover(self, level: int, pred: FuncDecl, property: Ast) -> None:
        check_same_context(self, pred, property, operation="Fixedpoint.add_cover")
        core.Z3_fixedpoint_add_cover(
            self._ref(), self.get_raw_handle(), level, pred.get_raw_handle(), property.get_raw_handle()
        )

    # -- configuration and diagnostics -------------------------------------

    def set_params(self, params: Params) -> None:
        check_same_context(self, params, operation="Fixedpoint.set_params")
        core.Z3_fixedpoint_set_params(self._ref(), self.get_raw_handle(), params.get_raw_handle())

    def set(self, **options: Union[bool, int, float, str]) -> None:
        """Shorthand for ``set_params(Params(ctx, **options))``.

        >>> fp.set(engine="spacer")     # doctest: +SKIP
        """
        with Params(self._ctx, **options) as params:
            self.set_params(params)

    def get_statistics(self) -> Statistics:
        return Statistics.wrap(self._ctx, core.Z3_fixedpoint_get_statistics(self._ref(), self.get_raw_handle()))

    def help(self) -> str:
        """Parameters this engine accepts."""
        return core.Z3_fixedpoint_get_help(self._ref(), self.get_raw_handle())

    @classmethod
    def get_help(cls, ctx: Optional[Context] = None) -> str:
        with cls(ctx) as fp:
            return fp.help()

    def get_rules(self) -> AstVector:
        return AstVector.wrap(self._ctx, core.Z3_fixedpoint_get_rules(self._ref(), self.get_raw_handle()))

    def get_assertions(self) -> AstVector:
        return AstVector.wrap(self._ctx, core.Z3_fixedpoint_get_assertions(self._ref(), self.get_raw_handle()))

    # -- text ------------------------------------------------------------

    def to_string(self) -> str:
        """Rules, facts and assertions in the engine's rule language."""
        return core.Z3_fixedpoint_to_string(self._ref(), self.get_raw_handle(), 0, ast_array([]))

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Fixedpoint({self.to_string()!r})"

    def from_string(self, text: str) -> AstVector:
        """Load rules from rule-language *text*; return the queries it contains."""
        text = check_text(text, "rule text")
        try:
            raw = core.Z3_fixedpoint_from_string(self._ref(), self.get_raw_handle(), text)
        except Z3Exception as exc:
            message = exception_message(exc)
            logger.warning("rule text rejected: %s", message)
            raise RuleParseError(f"cannot parse rule text: {message}") from exc
        return AstVector.wrap(self._ctx, raw)

    def from_file(self, path: Union[str, Path]) -> AstVector:
        """Load rules from the file at *path*; return the queries it contains.

        The file is read once here and its text handed to the engine, so a
        file that cannot be opened or decoded raises ``RuleFileError`` and
        only malformed contents raise ``RuleParseError``.
        """
        filename = check_text(str(path), "rule file path")
        try:
            text = Path(filename).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("cannot read rule file %s: %s", filename, exc)
            raise RuleFileError(
                f"cannot read rule file {filename}: {exc}",
                path=filename,
                hint="check that the path exists and is a readable UTF-8 file",
            ) from exc
        text = check_text(text, "rule file contents")
        try:
            raw = core.Z3_fixedpoint_from_string(self._ref(), self.get_raw_handle(), text)
        except Z3Exception as exc:
            message = exception_message(exc)
            logger.warning("rule file %s rejected: %s", filename, message)
            raise RuleParseError(f"cannot parse rule file {filename}: {message}") from exc
        return AstVector.wrap(self._ctx, raw)
