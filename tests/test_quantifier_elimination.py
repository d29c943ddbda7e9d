# tests/test_quantifier_elimination.py
"""
Tests for quantifier elimination and projection.
"""

import pytest

from z3shims import (
    AstVector,
    Bool,
    ContextMismatchError,
    Int,
    LightQuantifierElimination,
    Model,
    PreconditionError,
    QuantifierElimination,
    Real,
    SatResult,
    Solver,
    exists,
    forall,
)
from tests.conftest import equivalent, is_valid


QE = QuantifierElimination


@pytest.fixture
def xy(ctx):
    return Int.new_const("x", ctx), Int.new_const("y", ctx)


def _mentions(formula, name):
    return name in formula.to_string()


class TestEliminateQuantifiers:

    def test_bounded_existential(self, ctx, xy):
        x, y = xy
        formula = exists([x], x.gt(y) & x.lt(5))
        result = QE.eliminate_quantifiers(formula, True)
        assert isinstance(result, Bool)
        assert equivalent(result, y.lt(4))
        assert not _mentions(result, "exists")

    def test_result_equivalent_to_input(self, ctx, xy):
        x, y = xy
        formula = exists([x], (x + x).eq(y))
        result = QE.eliminate_quantifiers(formula)
        assert equivalent(result, formula)

    def test_quantifier_free_input_unchanged_in_meaning(self, ctx, xy):
        x, y = xy
        formula = x.lt(y)
        assert equivalent(QE.eliminate_quantifiers(formula), formula)

    def test_partial_pass_is_sound(self, ctx, xy):
        x, y = xy
        formula = exists([x], x.eq(y + 1) & x.gt(3))
        result = QE.eliminate_quantifiers(formula, eliminate_all=False)
        assert equivalent(result, formula)
        assert equivalent(QE.eliminate_existential_quantifiers(formula), formula)

    def test_outer_block_eliminated_without_eliminate_all(self, ctx, xy):
        x, y = xy
        formula = exists([x], x.gt(y) & x.lt(5))
        result = QE.eliminate_quantifiers(formula, eliminate_all=False)
        assert not _mentions(result, "exists")
        assert equivalent(result, y.lt(4))

    def test_same_kind_nested_block_eliminated(self, ctx, xy):
        x, y = xy
        z = Int.new_const("z", ctx)
        formula = exists([x], exists([y], x.lt(y) & y.lt(z)))
        result = QE.eliminate_existential_quantifiers(formula)
        assert not _mentions(result, "exists")
        assert equivalent(result, Bool.from_bool(True, ctx))

    def test_alternating_blocks_stay_sound(self, ctx, xy):
        x, y = xy
        formula = forall([y], exists([x], x.gt(y)))
        result = QE.eliminate_quantifiers(formula, eliminate_all=False)
        assert equivalent(result, formula)

    def test_simplify_with_qe(self, ctx, xy):
        x, y = xy
        formula = exists([x], x.eq(y) & x.gt(0))
        result = QE.simplify_with_qe(formula)
        assert equivalent(result, y.gt(0))


class TestModelGuided:

    def test_without_model(self, ctx, xy):
        x, y = xy
        formula = exists([x], x.gt(y) & x.lt(5))
        result = QE.eliminate_quantifiers_with_model(formula, None, True)
        assert equivalent(result, y.lt(4))

    def test_with_model(self, ctx, xy):
        x, y = xy
        body = x.gt(y) & x.lt(5)
        solver = Solver(ctx)
        solver.add(body)
        assert solver.check() is SatResult.SAT
        result = QE.eliminate_quantifiers_with_model(body, solver.model(), True)
        assert isinstance(result, Bool)
        assert is_valid(body.implies(result))

    def test_model_from_other_context(self, ctx, other_ctx, xy):
        x, _ = xy
        with pytest.raises(ContextMismatchError):
            QE.eliminate_quantifiers_with_model(x.gt(0), Model.empty(other_ctx))


class TestProjection:

    def test_project_removes_named_variable(self, ctx):
        alpha, beta = Real.new_const("alpha", ctx), Real.new_const("beta", ctx)
        body = alpha.gt(beta) & alpha.lt(10)
        solver = Solver(ctx)
        solver.add(body)
        assert solver.check() is SatResult.SAT
        model = solver.model()
        result = QE.project_variables(model, [alpha], body)
        assert not _mentions(result, "alpha")
        assert is_valid(body.implies(result))
        holds = model.eval(result, completion=True)
        assert holds is not None
        assert holds == Bool.from_bool(True, ctx)

    def test_project_nothing(self, ctx, xy):
        x, y = xy
        body = x.lt(y)
        solver = Solver(ctx)
        solver.add(body)
        solver.check()
        result = QE.project_variables(solver.model(), [], body)
        assert equivalent(result, body)

    def test_project_mismatched_variable(self, ctx, other_ctx, xy):
        x, y = xy
        solver = Solver(ctx)
        solver.add(x.lt(y))
        solver.check()
        stranger = Int.new_const("x", other_ctx)
        with pytest.raises(ContextMismatchError):
            QE.project_variables(solver.model(), [stranger], x.lt(y))


class TestLight:

    def test_eliminate_is_sound(self, ctx, xy):
        x, y = xy
        formula = exists([x], x.eq(y + 1) & x.gt(3))
        assert equivalent(LightQuantifierElimination.eliminate(formula), formula)

    def test_lite_over_vector(self, ctx, xy):
        x, y = xy
        formula = x.eq(y + 1) & x.gt(3)
        result = LightQuantifierElimination.lite(AstVector.from_slice([x]), formula)
        assert is_valid(formula.implies(result))

    def test_lite_mismatched_vector(self, ctx, other_ctx, xy):
        x, y = xy
        with pytest.raises(ContextMismatchError):
            LightQuantifierElimination.lite(AstVector(other_ctx), x.eq(y))


class TestNonBooleanInput:

    @pytest.mark.parametrize("eliminate", [
        QE.eliminate_quantifiers,
        QE.eliminate_existential_quantifiers,
        QE.eliminate_quantifiers_with_model,
        QE.simplify_with_qe,
        LightQuantifierElimination.eliminate,
    ])
    def test_integer_term_rejected(self, ctx, xy, eliminate):
        x, y = xy
        with pytest.raises(PreconditionError, match="boolean"):
            eliminate(x + y)

    def test_lite_rejects_integer_term(self, ctx, xy):
        x, y = xy
        with pytest.raises(PreconditionError):
            LightQuantifierElimination.lite(AstVector.from_slice([x]), x + y)
