"""
context.py — Shared-ownership handle to one native solver environment
======================================================================

A ``Context`` is the unit of shared ownership in this package.  Every
wrapped object holds one strongly, so the native environment lives at least
as long as anything created in it.  Several ``Context`` handles may share an
environment (see :meth:`Context.clone`); equality compares the environment,
not the handle.

Each thread gets a lazily created default context through
:meth:`Context.thread_local`.  Code that needs isolation constructs a
``Context`` explicitly and passes it along.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Any, Optional

import z3

from .config import ContextConfig
from .errors import ContextCreationError, ContextMismatchError

logger = logging.getLogger(__name__)

__all__ = ["Context", "check_same_context"]

_thread_state = threading.local()


class _Environment:
    """Owns the native context.  Released when the last handle drops it."""

    __slots__ = ("native", "config", "__weakref__")

    def __init__(self, config: ContextConfig) -> None:
        problems = config.validate()
        if problems:
            raise ContextCreationError("; ".join(problems))
        try:
            self.native = z3.Context(**config.to_params())
        except z3.Z3Exception as exc:
            logger.critical("native environment creation failed: %s", exc)
            raise ContextCreationError(f"cannot create native environment: {exc}") from exc
        self.config = config

    @property
    def alive(self) -> bool:
        return self.native.ref() is not None


class Context:
    """Cloneable handle to a native environment.

    Parameters
    ----------
    config:
        Environment options.  Keyword arguments are merged into
        ``config.extra`` as raw native parameters.
    """

    __slots__ = ("_env", "__weakref__")

    def __init__(self, config: Optional[ContextConfig] = None, **params: Any) -> None:
        config = config or ContextConfig()
        if params:
            config = replace(config, extra={**config.extra, **params})
        self._env = _Environment(config)
        logger.debug("created native environment %#x", id(self._env))

    @classmethod
    def _sharing(cls, env: _Environment) -> "Context":
        handle = cls.__new__(cls)
        handle._env = env
        return handle

    @classmethod
    def thread_local(cls) -> "Context":
        """Return the calling thread's default context, creating it if absent."""
        ctx = getattr(_thread_state, "context", None)
        if ctx is None:
            ctx = cls()
            _thread_state.context = ctx
            logger.debug("registered thread-local context for %s",
                         threading.current_thread().name)
        return ctx

    def clone(self) -> "Context":
        """A new handle sharing this environment."""
        return Context._sharing(self._env)

    def ref(self) -> Any:
        """Raw native context, for passing to ``z3core`` calls."""
        return self._env.native.ref()

    @property
    def config(self) -> ContextConfig:
        return self._env.config

    @property
    def alive(self) -> bool:
        return self._env.alive

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Context):
            return NotImplemented
        return self._env is other._env

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self) -> int:
        return id(self._env)

    def __repr__(self) -> str:
        return f"Context(env={id(self._env):#x})"


def check_same_context(*operands: Any, operation: str = "operation") -> Context:
    """Return the single context shared by *operands*.

    Every operand must expose ``get_context()``.  Raises
    ``ContextMismatchError`` before any native call is issued when two
    operands disagree.
    """
    if not operands:
        raise ValueError(f"{operation}: at least one operand is required")
    ctx = operands[0].get_context()
    for position, other in enumerate(operands[1:], start=1):
        if other.get_context() != ctx:
            raise ContextMismatchError(
                f"{operation}: operand {position} belongs to a different context",
                hint="translate the operand into the target context first",
            )
    return ctx
