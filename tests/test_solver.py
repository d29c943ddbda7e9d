# tests/test_solver.py
"""
Tests for solvers, models, statistics and parameter sets.
"""

import copy

import pytest

from z3shims import (
    Bool,
    ContextMismatchError,
    Int,
    Model,
    Params,
    PreconditionError,
    SatResult,
    Solver,
    Statistics,
)


class TestSolver:

    def test_sat_and_model(self, ctx):
        x = Int.new_const("x", ctx)
        solver = Solver(ctx)
        solver.add(x.gt(2), x.lt(4))
        assert solver.check() is SatResult.SAT
        value = solver.model().eval(x)
        assert value is not None
        assert value.as_int().as_int() == 3

    def test_unsat(self, ctx):
        p = Bool.new_const("p", ctx)
        solver = Solver(ctx)
        solver.add(p, ~p)
        assert solver.check() is SatResult.UNSAT

    def test_assumptions(self, ctx):
        p, q = Bool.new_const("p", ctx), Bool.new_const("q", ctx)
        solver = Solver(ctx)
        solver.add(p.implies(q))
        assert solver.check(p, ~q) is SatResult.UNSAT
        assert solver.check(p) is SatResult.SAT

    def test_model_requires_sat(self, ctx):
        solver = Solver(ctx)
        with pytest.raises(PreconditionError, match="no model"):
            solver.model()
        solver.add(Bool.from_bool(False, ctx))
        solver.check()
        with pytest.raises(PreconditionError):
            solver.model()

    def test_add_invalidates_model(self, ctx):
        solver = Solver(ctx)
        solver.check()
        solver.add(Bool.new_const("p", ctx))
        with pytest.raises(PreconditionError):
            solver.model()

    def test_add_across_contexts(self, ctx, other_ctx):
        solver = Solver(ctx)
        with pytest.raises(ContextMismatchError):
            solver.add(Bool.new_const("p", other_ctx))

    def test_solver_is_not_copyable(self, ctx):
        with pytest.raises(TypeError):
            copy.copy(Solver(ctx))

    def test_rendering(self, ctx):
        solver = Solver(ctx)
        solver.add(Bool.new_const("flag", ctx))
        assert "flag" in solver.to_string()

    def test_statistics(self, ctx):
        solver = Solver(ctx)
        solver.add(Int.new_const("x", ctx).gt(0))
        solver.check()
        stats = solver.statistics()
        assert isinstance(stats, Statistics)
        assert len(stats) == len(stats.keys())
        table = stats.as_dict()
        for key in stats:
            assert stats[key] == table[key]
        with pytest.raises(KeyError):
            stats["no such counter"]
        assert stats.get("no such counter", -1) == -1


class TestModel:

    def test_empty_model(self, ctx):
        model = Model.empty(ctx)
        assert len(model) == 0
        assert model.eval(Int.new_const("x", ctx)) is not None

    def test_completion_assigns_default(self, ctx):
        model = Model.empty(ctx)
        x = Int.new_const("x", ctx)
        value = model.eval(x, completion=True)
        assert value.is_numeral()

    def test_eval_across_contexts(self, ctx, other_ctx):
        with pytest.raises(ContextMismatchError):
            Model.empty(ctx).eval(Int.new_const("x", other_ctx))


class TestParams:

    def test_set_dispatches_on_type(self, ctx):
        params = Params(ctx, timeout=100, random_seed=3)
        params.set("engine", "spacer")
        params.set("flag", True)
        params.set("ratio", 0.5)
        text = params.to_string()
        assert "spacer" in text
        assert "timeout" in text

    def test_rejects_unsupported_values(self, ctx):
        with pytest.raises(TypeError):
            Params(ctx).set("opt", [1])

    def test_rejects_negative_ints(self, ctx):
        with pytest.raises(ValueError):
            Params(ctx).set("timeout", -5)

    def test_solver_accepts_params(self, ctx):
        solver = Solver(ctx)
        solver.set_params(Params(ctx, timeout=1000))
        assert solver.check() is SatResult.SAT
