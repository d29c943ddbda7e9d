# tests/conftest.py
"""
Shared fixtures and helpers for the z3shims test-suite.

Every test that creates native objects gets its own ``Context`` so that no
state leaks between tests through the thread-local default.
"""

import pytest

from z3shims import Bool, Context, FuncDecl, SatResult, Solver


@pytest.fixture
def ctx():
    return Context()


@pytest.fixture
def other_ctx():
    return Context()


def is_valid(formula: Bool) -> bool:
    """True when *formula* holds in every model."""
    solver = Solver(formula.get_context())
    solver.add(formula.not_())
    return solver.check() is SatResult.UNSAT


def is_satisfiable(formula: Bool) -> bool:
    solver = Solver(formula.get_context())
    solver.add(formula)
    return solver.check() is SatResult.SAT


def equivalent(a: Bool, b: Bool) -> bool:
    return is_valid(a.eq(b))


def make_relations(ctx: Context, *names: str):
    """Nullary relations, one per name."""
    return [FuncDecl.relation(name, ctx=ctx) for name in names]
