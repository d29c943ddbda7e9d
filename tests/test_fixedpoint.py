# tests/test_fixedpoint.py
"""
Tests for the Horn-clause rule-solving context.
"""

import copy

import pytest

from z3shims import (
    AstVector,
    Bool,
    ContextMismatchError,
    EmbeddedNulError,
    Fixedpoint,
    FuncDecl,
    Int,
    PreconditionError,
    QueryResult,
    RuleFileError,
    RuleParseError,
    Sort,
    Statistics,
    exists,
    forall,
)
from tests.conftest import make_relations


RULE_TEXT = """
(declare-rel a ())
(declare-rel b ())
(rule a)
(rule (=> a b))
(query b)
"""


@pytest.fixture
def chain(ctx):
    """p is a fact, p implies q, r is never derived."""
    fp = Fixedpoint(ctx)
    p, q, r = make_relations(ctx, "p", "q", "r")
    fp.register_relation(p, q, r)
    fp.add_fact(p, [])
    fp.add_rule(p().implies(q()))
    return fp, p, q, r


@pytest.fixture
def counter(ctx):
    """inv(0); inv(x) and x < 10 implies inv(x + 1), solved with spacer."""
    fp = Fixedpoint(ctx)
    fp.set(engine="spacer")
    inv = FuncDecl.relation("inv", [Sort.int(ctx)])
    fp.register_relation(inv)
    x = Int.new_const("x", ctx)
    fp.add_fact(inv, [Int.from_int(0, ctx)])
    fp.add_rule(forall([x], (inv(x) & x.lt(10)).implies(inv(x + 1))))
    return fp, inv, x


class TestDerivability:

    def test_derived_relation(self, chain):
        fp, _, q, _ = chain
        assert fp.query(q()) is QueryResult.DERIVABLE
        answer = fp.get_answer()
        assert answer is not None
        assert isinstance(answer, Bool)

    def test_unrelated_relation_not_derivable(self, chain):
        fp, _, _, r = chain
        assert fp.query(r()) is not QueryResult.DERIVABLE

    def test_queries_are_repeatable(self, chain):
        fp, _, q, _ = chain
        first = fp.query(q())
        assert fp.query(q()) is first

    def test_query_relations(self, chain):
        fp, _, q, r = chain
        assert fp.query_relations([q]) is QueryResult.DERIVABLE
        assert fp.query_relations([r]) is not QueryResult.DERIVABLE

    def test_query_relations_needs_one(self, chain):
        fp = chain[0]
        with pytest.raises(PreconditionError):
            fp.query_relations([])

    def test_reason_unknown_is_text(self, chain):
        fp, _, q, _ = chain
        fp.query(q())
        assert isinstance(fp.get_reason_unknown(), str)

    def test_update_named_rule(self, ctx):
        fp = Fixedpoint(ctx)
        (p,) = make_relations(ctx, "p")
        fp.register_relation(p)
        fp.add_rule(p(), name="base")
        fp.update_rule(p(), "base")
        assert fp.query(p()) is QueryResult.DERIVABLE


class TestAccumulatedState:

    def test_rules_listed(self, chain):
        fp = chain[0]
        rules = fp.get_rules()
        assert isinstance(rules, AstVector)
        assert rules.len() >= 2

    def test_assertions_listed(self, ctx):
        fp = Fixedpoint(ctx)
        y = Int.new_const("y", ctx)
        fp.assert_(y.gt(0))
        assertions = fp.get_assertions()
        assert assertions.len() == 1
        assert assertions[0] == y.gt(0)

    def test_fact_requires_relation(self, ctx):
        fp = Fixedpoint(ctx)
        f = FuncDecl.new("f", [Sort.int(ctx)], Sort.int(ctx))
        with pytest.raises(PreconditionError, match="not a relation"):
            fp.add_fact(f, [Int.from_int(1, ctx)])

    def test_fact_arity_checked(self, ctx):
        fp = Fixedpoint(ctx)
        rel = FuncDecl.relation("edge", [Sort.int(ctx), Sort.int(ctx)])
        with pytest.raises(PreconditionError, match="expects 2"):
            fp.add_fact(rel, [Int.from_int(1, ctx)])

    def test_mismatched_contexts(self, ctx, other_ctx):
        fp = Fixedpoint(ctx)
        (alien,) = make_relations(other_ctx, "alien")
        with pytest.raises(ContextMismatchError):
            fp.add_rule(alien())
        with pytest.raises(ContextMismatchError):
            fp.register_relation(alien)
        with pytest.raises(ContextMismatchError):
            fp.query(alien())

    def test_not_copyable(self, ctx):
        with pytest.raises(TypeError):
            copy.copy(Fixedpoint(ctx))


class TestText:

    def test_round_trip_preserves_consequences(self, ctx, chain):
        fp, _, q, _ = chain
        text = fp.to_string()
        assert "q" in text
        restored = Fixedpoint(ctx)
        restored.from_string(text)
        assert restored.query(q()) is QueryResult.DERIVABLE

    def test_from_string_returns_queries(self, ctx):
        fp = Fixedpoint(ctx)
        queries = fp.from_string(RULE_TEXT)
        assert queries.len() == 1
        assert fp.query(queries[0]) is QueryResult.DERIVABLE

    def test_malformed_text(self, ctx):
        with pytest.raises(RuleParseError) as info:
            Fixedpoint(ctx).from_string("(rule (unbalanced")
        assert info.value.recoverable

    def test_embedded_nul(self, ctx):
        with pytest.raises(EmbeddedNulError):
            Fixedpoint(ctx).from_string("(rule a)\x00")

    def test_from_file(self, ctx, tmp_path):
        path = tmp_path / "rules.smt2"
        path.write_text(RULE_TEXT)
        queries = Fixedpoint(ctx).from_file(path)
        assert queries.len() == 1

    def test_missing_file(self, ctx, tmp_path):
        missing = tmp_path / "absent.smt2"
        with pytest.raises(RuleFileError) as info:
            Fixedpoint(ctx).from_file(missing)
        assert info.value.path == str(missing)

    def test_directory_is_not_a_rule_file(self, ctx, tmp_path):
        with pytest.raises(RuleFileError) as info:
            Fixedpoint(ctx).from_file(tmp_path)
        assert info.value.path == str(tmp_path)

    def test_malformed_file_contents(self, ctx, tmp_path):
        path = tmp_path / "broken.smt2"
        path.write_text("(declare-rel")
        with pytest.raises(RuleParseError) as info:
            Fixedpoint(ctx).from_file(path)
        assert str(path) in str(info.value)


class TestDiagnostics:

    def test_help(self, ctx):
        assert Fixedpoint(ctx).help()
        assert Fixedpoint.get_help(ctx)

    def test_statistics_after_query(self, chain):
        fp, _, q, _ = chain
        fp.query(q())
        assert isinstance(fp.get_statistics(), Statistics)


class TestLevelBasedEngine:

    def test_bounded_counter(self, ctx, counter):
        fp, inv, x = counter
        goal = exists([x], inv(x) & x.gt(10))
        assert fp.query(goal) is not QueryResult.DERIVABLE
        reachable = exists([x], inv(x) & x.eq(10))
        assert fp.query(reachable) is QueryResult.DERIVABLE

    def test_levels_and_cover(self, ctx, counter):
        fp, inv, x = counter
        fp.query(exists([x], inv(x) & x.gt(10)))
        assert fp.get_num_levels(inv) >= 0
        cover = fp.get_cover_delta(-1, inv)
        assert cover is None or isinstance(cover, Bool)

    def test_cover_operands_share_context(self, ctx, other_ctx, counter):
        fp, inv, _ = counter
        with pytest.raises(ContextMismatchError):
            fp.add_cover(-1, inv, Bool.from_bool(True, other_ctx))
