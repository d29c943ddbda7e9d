# tests/test_context.py
"""
Tests for context handles, configuration and handle ownership.
"""

import copy
import threading

import pytest

from z3shims import (
    Context,
    ContextConfig,
    ContextCreationError,
    ContextMismatchError,
    Int,
    PreconditionError,
    check_same_context,
)


class TestContextIdentity:

    def test_fresh_contexts_differ(self, ctx, other_ctx):
        assert ctx != other_ctx
        assert not (ctx == other_ctx)

    def test_clone_shares_environment(self, ctx):
        twin = ctx.clone()
        assert twin is not ctx
        assert twin == ctx
        assert hash(twin) == hash(ctx)

    def test_contexts_usable_as_dict_keys(self, ctx, other_ctx):
        table = {ctx: "a", other_ctx: "b"}
        assert table[ctx.clone()] == "a"
        assert len(table) == 2

    def test_comparison_with_other_types(self, ctx):
        assert ctx != "context"

    def test_alive_and_ref(self, ctx):
        assert ctx.alive
        assert ctx.ref() is not None


class TestThreadLocal:

    def test_same_thread_same_context(self):
        assert Context.thread_local() == Context.thread_local()

    def test_each_thread_gets_its_own(self):
        seen = []

        def worker():
            seen.append(Context.thread_local())

        t = threading.Thread(target=worker)
        t.start()
        t.join()
        assert seen[0] != Context.thread_local()

    def test_default_used_when_ctx_omitted(self):
        x = Int.new_const("x")
        assert x.get_context() == Context.thread_local()


class TestContextConfig:

    def test_defaults_validate(self):
        assert ContextConfig().validate() == []

    def test_timeout_rendered(self):
        params = ContextConfig(timeout_ms=500).to_params()
        assert params["timeout"] == 500
        assert params["model"] is True

    def test_bad_timeout_reported(self):
        warnings = ContextConfig(timeout_ms=0).validate()
        assert any("timeout_ms" in w for w in warnings)

    def test_invalid_config_rejected(self):
        with pytest.raises(ContextCreationError):
            Context(ContextConfig(timeout_ms=-1))

    def test_keyword_params_do_not_mutate_config(self):
        config = ContextConfig()
        ctx = Context(config, proof=False)
        assert config.extra == {}
        assert ctx.config.extra == {"proof": False}

    def test_creation_prints_nothing(self, capfd):
        Context()
        Context(ContextConfig(unsat_core=True, timeout_ms=100))
        out, err = capfd.readouterr()
        assert out == ""
        assert err == ""

    def test_default_params_have_no_stdout_side_effects(self):
        params = ContextConfig().to_params()
        assert set(params) == {"model", "proof", "unsat_core"}


class TestCheckSameContext:

    def test_returns_shared_context(self, ctx):
        a, b = Int.new_const("a", ctx), Int.new_const("b", ctx)
        assert check_same_context(a, b) == ctx

    def test_mismatch_raises(self, ctx, other_ctx):
        a, b = Int.new_const("a", ctx), Int.new_const("b", other_ctx)
        with pytest.raises(ContextMismatchError, match="operand 1"):
            check_same_context(a, b, operation="test")

    def test_no_operands(self):
        with pytest.raises(ValueError):
            check_same_context()


class TestOwnership:

    def test_release_is_idempotent(self, ctx):
        x = Int.new_const("x", ctx)
        x.release()
        x.release()
        assert x.released

    def test_use_after_release(self, ctx):
        x = Int.new_const("x", ctx)
        x.release()
        with pytest.raises(PreconditionError, match="after release"):
            x.get_raw_handle()

    def test_context_manager_releases(self, ctx):
        with Int.new_const("x", ctx) as x:
            assert not x.released
        assert x.released

    def test_copy_is_independent_owner(self, ctx):
        x = Int.new_const("x", ctx)
        y = copy.copy(x)
        z = copy.deepcopy(x)
        x.release()
        assert y == z
        assert str(y) == "x"

    def test_clone_keeps_environment_alive(self):
        handle = Context().clone()
        x = Int.new_const("x", handle)
        assert str(x + 1) == "(+ x 1)"
