"""
quantifier_elimination.py — Quantifier elimination façades
==========================================================

Every entry point is sound but not complete: a result is always equivalent
to (or, for projection, implied by) its input, yet it may still contain
quantifiers.  Callers must not assume quantifier-freedom.

Tactic-based elimination runs one of the engine's tactics on a single-goal
problem and recombines the resulting subgoals into one formula.  When the
engine gives up (tactic failure), the input formula is returned unchanged.

Block selection
---------------
``eliminate_all=True`` runs the full ``qe`` tactic over the whole formula.
With ``eliminate_all=False`` only the outermost quantifier block is
targeted: when the formula is a run of same-kind quantifiers over a
quantifier-free body, that block is eliminated with ``qe``.  Any other shape
(alternating blocks, nested quantifiers, quantifiers under connectives) gets
the cheaper ``qe-light`` pass, which removes only variables that can be
solved away syntactically.

Every entry point taking a formula rejects terms that are not boolean.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, List, Optional, Sequence

from ._native import (
    Z3Exception,
    app_array,
    ast_array,
    consts,
    core,
    exception_message,
    owned,
)
from .ast import Ast, Bool
from .ast_vector import AstVector
from .context import Context, check_same_context
from .errors import PreconditionError

if TYPE_CHECKING:
    from .solver import Model

logger = logging.getLogger(__name__)

__all__ = ["QuantifierElimination", "LightQuantifierElimination"]

FULL_TACTIC = "qe"
LIGHT_TACTIC = "qe-light"


def _goal_formula(ctx: Context, goal: Any) -> Any:
    ref = ctx.ref()
    size = core.Z3_goal_size(ref, goal)
    if size == 0:
        return core.Z3_mk_true(ref)
    if size == 1:
        return core.Z3_goal_formula(ref, goal, 0)
    parts = [core.Z3_goal_formula(ref, goal, i) for i in range(size)]
    return core.Z3_mk_and(ref, size, ast_array(parts))


def _run_tactic(name: str, formula: Ast) -> Bool:
    """Apply tactic *name* to *formula*; return the recombined subgoals.

    Native failures surface as ``Z3Exception`` for the caller to handle.
    """
    ctx = formula.get_context()
    ref = ctx.ref()
    tactic = core.Z3_mk_tactic(ref, name)
    with owned(ref, tactic, core.Z3_tactic_inc_ref, core.Z3_tactic_dec_ref):
        goal = core.Z3_mk_goal(ref, False, False, False)
        with owned(ref, goal, core.Z3_goal_inc_ref, core.Z3_goal_dec_ref):
            core.Z3_goal_assert(ref, goal, formula.get_raw_handle())
            applied = core.Z3_tactic_apply(ref, tactic, goal)
            with owned(ref, applied, core.Z3_apply_result_inc_ref, core.Z3_apply_result_dec_ref):
                count = core.Z3_apply_result_get_num_subgoals(ref, applied)
                if count == 0:
                    return Bool.from_bool(False, ctx)
                disjuncts: List[Bool] = []
                for i in range(count):
                    subgoal = core.Z3_apply_result_get_subgoal(ref, applied, i)
                    with owned(ref, subgoal, core.Z3_goal_inc_ref, core.Z3_goal_dec_ref):
                        disjuncts.append(Bool.wrap(ctx, _goal_formula(ctx, subgoal)))
                if len(disjuncts) == 1:
                    return disjuncts[0]
                return disjuncts[0].or_(*disjuncts[1:])


def _with_fallback(name: str, formula: Ast) -> Bool:
    try:
        return _run_tactic(name, formula)
    except Z3Exception as exc:
        logger.debug("tactic %s gave up (%s); keeping the input formula", name, exception_message(exc))
        return Bool.wrap(formula.get_context(), formula.get_raw_handle())


def _require_formula(formula: Ast, operation: str) -> None:
    if formula.sort_kind() != consts.Z3_BOOL_SORT:
        raise PreconditionError(
            f"{operation}: expected a boolean formula, got a term of sort {formula.sort()}"
        )


def _is_quantifier(ref: Any, raw: Any) -> bool:
    return (
        core.Z3_get_ast_kind(ref, raw) == consts.Z3_QUANTIFIER_AST
        and not core.Z3_is_lambda(ref, raw)
    )


def _outer_block_body(ref: Any, raw: Any) -> Optional[Any]:
    """Body below the leading run of same-kind quantifiers, ``None`` if unquantified."""
    if not _is_quantifier(ref, raw):
        return None
    existential = core.Z3_is_quantifier_exists(ref, raw)
    body = core.Z3_get_quantifier_body(ref, raw)
    while _is_quantifier(ref, body) and core.Z3_is_quantifier_exists(ref, body) == existential:
        body = core.Z3_get_quantifier_body(ref, body)
    return body


def _has_quantifier(ref: Any, raw: Any) -> bool:
    seen = set()
    stack = [raw]
    while stack:
        node = stack.pop()
        kind = core.Z3_get_ast_kind(ref, node)
        if kind == consts.Z3_QUANTIFIER_AST:
            return True
        if kind != consts.Z3_APP_AST:
            continue
        node_id = core.Z3_get_ast_id(ref, node)
        if node_id in seen:
            continue
        seen.add(node_id)
        app = core.Z3_to_app(ref, node)
        stack.extend(
            core.Z3_get_app_arg(ref, app, i) for i in range(core.Z3_get_app_num_args(ref, app))
        )
    return False


def _eliminate_outer_block(formula: Ast) -> Bool:
    ref = formula.get_context().ref()
    body = _outer_block_body(ref, formula.get_raw_handle())
    if body is not None and not _has_quantifier(ref, body):
        return _with_fallback(FULL_TACTIC, formula)
    logger.debug("no single outer quantifier block; using %s", LIGHT_TACTIC)
    return _with_fallback(LIGHT_TACTIC, formula)


def _app_array(ctx: Context, nodes: Sequence[Ast]) -> Any:
    ref = ctx.ref()
    return app_array([core.Z3_to_app(ref, n.get_raw_handle()) for n in nodes])


class QuantifierElimination:
    """Namespace for quantifier elimination over boolean formulas."""

    @staticmethod
    def eliminate_quantifiers(formula: Ast, eliminate_all: bool = True) -> Bool:
        """Remove quantifiers from *formula* where the engine can.

        Returns *formula* itself when the engine cannot make progress.  See
        the module docstring for what ``eliminate_all`` selects.
        """
        _require_formula(formula, "eliminate_quantifiers")
        if eliminate_all:
            return _with_fallback(FULL_TACTIC, formula)
        return _eliminate_outer_block(formula)

    @staticmethod
    def eliminate_quantifiers_with_model(
        formula: Ast,
        model: Optional["Model"] = None,
        eliminate_all: bool = True,
    ) -> Bool:
        """Model-guided elimination.

        With a *model*, runs a projection over zero variables guided by the
        model and then, if *eliminate_all* is set, a full elimination pass on
        what remains.  Without one there is no guidance to give, and this is
        plain :meth:`eliminate_quantifiers`.
        """
        _require_formula(formula, "eliminate_quantifiers_with_model")
        if model is None:
            return QuantifierElimination.eliminate_quantifiers(formula, eliminate_all)
        ctx = check_same_context(model, formula, operation="eliminate_quantifiers_with_model")
        raw = core.Z3_qe_model_project(
            ctx.ref(), model.get_raw_handle(), 0, app_array([]), formula.get_raw_handle()
        )
        projected = Bool.wrap(ctx, raw)
        if eliminate_all:
            return QuantifierElimination.eliminate_quantifiers(projected, True)
        return projected

    @staticmethod
    def project_variables(model: "Model", variables: Sequence[Ast], formula: Ast) -> Bool:
        """Eliminate exactly *variables* from *formula*, using *model* for witnesses.

        *model* must satisfy *formula*.  The result is implied by
        ``exists variables. formula`` and holds in *model*.
        """
        variables = list(variables)
        ctx = check_same_context(model, formula, *variables, operation="project_variables")
        raw = core.Z3_qe_model_project(
            ctx.ref(),
            model.get_raw_handle(),
            len(variables),
            _app_array(ctx, variables),
            formula.get_raw_handle(),
        )
        return Bool.wrap(ctx, raw)

    @staticmethod
    def eliminate_existential_quantifiers(formula: Ast) -> Bool:
        """The cheaper, partial pass of :meth:`eliminate_quantifiers`."""
        return QuantifierElimination.eliminate_quantifiers(formula, False)

    @staticmethod
    def simplify_with_qe(formula: Ast) -> Bool:
        """Simplify, run a light elimination pass, then simplify again."""
        _require_formula(formula, "simplify_with_qe")
        simplified = Bool.wrap(formula.get_context(), formula.get_raw_handle()).simplify()
        return _with_fallback(LIGHT_TACTIC, simplified).simplify()


class LightQuantifierElimination:
    """Fast, incomplete elimination."""

    @staticmethod
    def eliminate(formula: Ast) -> Bool:
        _require_formula(formula, "LightQuantifierElimination.eliminate")
        return _with_fallback(LIGHT_TACTIC, formula)

    @staticmethod
    def lite(variables: AstVector, formula: Ast) -> Bool:
        """Eliminate the constants in *variables* from the quantifier-free *formula*.

        Variables the procedure cannot remove stay in the result.
        """
        ctx = check_same_context(variables, formula, operation="LightQuantifierElimination.lite")
        _require_formula(formula, "LightQuantifierElimination.lite")
        raw = core.Z3_qe_lite(ctx.ref(), variables.get_raw_handle(), formula.get_raw_handle())
        return Bool.wrap(ctx, raw)
