"""
solver.py — Satisfiability checking and models
==============================================

A small wrapper over the native incremental solver, enough to decide
formulas and to obtain the models that guide projection in
:mod:`z3shims.quantifier_elimination`.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Optional

from ._native import RawAst, ast_array, consts, core, raw_handles
from .ast import Ast, Dynamic, _default_ctx
from .context import Context, check_same_context
from .errors import PreconditionError
from .handle import NativeHandle
from .statistics import Params, Statistics

logger = logging.getLogger(__name__)

__all__ = ["SatResult", "Solver", "Model"]


class SatResult(Enum):
    """Outcome of a satisfiability check."""
    SAT = "sat"
    UNSAT = "unsat"
    UNKNOWN = "unknown"

    @classmethod
    def from_lbool(cls, value: int) -> "SatResult":
        if value == consts.Z3_L_TRUE:
            return cls.SAT
        if value == consts.Z3_L_FALSE:
            return cls.UNSAT
        return cls.UNKNOWN


class Model(NativeHandle):
    """An assignment of values to constants and functions."""

    __slots__ = ()

    kind = "model"

    def _inc_ref(self, ctx: Context, raw: Any) -> None:
        core.Z3_model_inc_ref(ctx.ref(), raw)

    def _dec_ref(self, ctx: Context, raw: Any) -> None:
        core.Z3_model_dec_ref(ctx.ref(), raw)

    @classmethod
    def wrap(cls, ctx: Context, raw: Any) -> "Model":
        return cls._adopt(ctx, raw)

    @classmethod
    def empty(cls, ctx: Optional[Context] = None) -> "Model":
        """A model with no interpretations."""
        ctx = _default_ctx(ctx)
        return cls.wrap(ctx, core.Z3_mk_model(ctx.ref()))

    def eval(self, node: Ast, completion: bool = False) -> Optional[Dynamic]:
        """Value of *node* in this model, or ``None`` if it cannot be evaluated.

        With *completion*, constants the model leaves open get default
        values, and those values are added to the model.
        """
        check_same_context(self, node, operation="Model.eval")
        out = (RawAst * 1)()
        if not core.Z3_model_eval(self._ref(), self.get_raw_handle(), node.get_raw_handle(), completion, out):
            return None
        return Dynamic.wrap(self._ctx, out[0])

    def __len__(self) -> int:
        ref, raw = self._ref(), self.get_raw_handle()
        return core.Z3_model_get_num_consts(ref, raw) + core.Z3_model_get_num_funcs(ref, raw)

    def to_string(self) -> str:
        return core.Z3_model_to_string(self._ref(), self.get_raw_handle())

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Model({self.to_string()!r})"


class Solver(NativeHandle):
    """Incremental satisfiability solver."""

    __slots__ = ("_last",)

    kind = "solver"

    def __init__(self, ctx: Optional[Context] = None) -> None:
        super().__init__()
        self._last: Optional[SatResult] = None
        ctx = _default_ctx(ctx)
        self._own(ctx, core.Z3_mk_solver(ctx.ref()))

    def _inc_ref(self, ctx: Context, raw: Any) -> None:
        core.Z3_solver_inc_ref(ctx.ref(), raw)

    def _dec_ref(self, ctx: Context, raw: Any) -> None:
        core.Z3_solver_dec_ref(ctx.ref(), raw)

    def __copy__(self) -> "Solver":
        raise TypeError("a Solver is stateful and cannot be copied; share the object instead")

    def add(self, *formulas: Ast) -> None:
        if formulas:
            check_same_context(self, *formulas, operation="Solver.add")
        self._last = None
        for formula in formulas:
            core.Z3_solver_assert(self._ref(), self.get_raw_handle(), formula.get_raw_handle())

    def check(self, *assumptions: Ast) -> SatResult:
        if assumptions:
            check_same_context(self, *assumptions, operation="Solver.check")
            value = core.Z3_solver_check_assumptions(
                self._ref(), self.get_raw_handle(), len(assumptions), ast_array(raw_handles(assumptions))
            )
        else:
            value = core.Z3_solver_check(self._ref(), self.get_raw_handle())
        self._last = SatResult.from_lbool(value)
        logger.debug("solver check: %s", self._last.value)
        return self._last

    def model(self) -> Model:
        """Model of the last ``SAT`` check."""
        if self._last is not SatResult.SAT:
            raise PreconditionError(
                "no model available",
                hint="call check() and obtain SatResult.SAT first",
            )
        return Model.wrap(self._ctx, core.Z3_solver_get_model(self._ref(), self.get_raw_handle()))

    def reason_unknown(self) -> str:
        return core.Z3_solver_get_reason_unknown(self._ref(), self.get_raw_handle())

    def set_params(self, params: Params) -> None:
        check_same_context(self, params, operation="Solver.set_params")
        core.Z3_solver_set_params(self._ref(), self.get_raw_handle(), params.get_raw_handle())

    def statistics(self) -> Statistics:
        return Statistics.wrap(self._ctx, core.Z3_solver_get_statistics(self._ref(), self.get_raw_handle()))

    def to_string(self) -> str:
        return core.Z3_solver_to_string(self._ref(), self.get_raw_handle())

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Solver({self.to_string()!r})"
