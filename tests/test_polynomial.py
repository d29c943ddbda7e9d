# tests/test_polynomial.py
"""
Tests for polynomial subresultants.
"""

import pytest

from z3shims import AstVector, ContextMismatchError, Polynomial, Real
from tests.conftest import is_valid


class TestSubresultants:

    def test_linear_pair(self, ctx):
        x, y = Real.new_const("x", ctx), Real.new_const("y", ctx)
        p = 2 * x + y
        q = 3 * x - 2 * y + 2
        result = Polynomial.subresultants(p, q, x)
        assert isinstance(result, AstVector)
        assert result.get_context() == ctx
        assert result.len() == 1
        assert is_valid(result[0].as_real().eq(4 - 7 * y))

    def test_result_is_owned_vector(self, ctx):
        x, y = Real.new_const("x", ctx), Real.new_const("y", ctx)
        result = Polynomial.subresultants(x * x - y, x - 1, x)
        assert result.len() >= 1
        result.release()
        assert result.released

    def test_operands_share_context(self, ctx, other_ctx):
        x = Real.new_const("x", ctx)
        y = Real.new_const("y", other_ctx)
        with pytest.raises(ContextMismatchError):
            Polynomial.subresultants(x + 1, y + 1, x)
