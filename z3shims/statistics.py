"""
statistics.py — Solver statistics and parameter sets
====================================================

``Statistics`` is a read-only snapshot returned by solver objects.
``Params`` is the mutable parameter set accepted by ``set_params`` calls;
values are dispatched to the native setter matching their Python type.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, Optional, Union

from ._native import check_text, core
from .ast import _default_ctx
from .context import Context
from .handle import NativeHandle

logger = logging.getLogger(__name__)

__all__ = ["Statistics", "Params"]

StatValue = Union[int, float]


class Statistics(NativeHandle):
    """Key/value counters reported by the engine."""

    __slots__ = ()

    kind = "stats"

    def _inc_ref(self, ctx: Context, raw: Any) -> None:
        core.Z3_stats_inc_ref(ctx.ref(), raw)

    def _dec_ref(self, ctx: Context, raw: Any) -> None:
        core.Z3_stats_dec_ref(ctx.ref(), raw)

    @classmethod
    def wrap(cls, ctx: Context, raw: Any) -> "Statistics":
        return cls._adopt(ctx, raw)

    def __len__(self) -> int:
        return core.Z3_stats_size(self._ref(), self.get_raw_handle())

    def _entry(self, idx: int) -> StatValue:
        if core.Z3_stats_is_uint(self._ref(), self.get_raw_handle(), idx):
            return core.Z3_stats_get_uint_value(self._ref(), self.get_raw_handle(), idx)
        return core.Z3_stats_get_double_value(self._ref(), self.get_raw_handle(), idx)

    def keys(self) -> List[str]:
        return [
            core.Z3_stats_get_key(self._ref(), self.get_raw_handle(), i)
            for i in range(len(self))
        ]

    def get(self, key: str, default: Optional[StatValue] = None) -> Optional[StatValue]:
        for idx, name in enumerate(self.keys()):
            if name == key:
                return self._entry(idx)
        return default

    def __getitem__(self, key: str) -> StatValue:
        value = self.get(key)
        if value is None:
            raise KeyError(key)
        return value

    def __contains__(self, key: object) -> bool:
        return key in self.keys()

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def as_dict(self) -> Dict[str, StatValue]:
        return {name: self._entry(idx) for idx, name in enumerate(self.keys())}

    def to_string(self) -> str:
        return core.Z3_stats_to_string(self._ref(), self.get_raw_handle())

    __str__ = to_string

    def __repr__(self) -> str:
        return f"Statistics({self.as_dict()!r})"


class Params(NativeHandle):
    """A native parameter set.

    >>> p = Params(engine="spacer", timeout=1000)     # doctest: +SKIP
    """

    __slots__ = ()

    kind = "params"

    def __init__(self, ctx: Optional[Context] = None, **values: Any) -> None:
        super().__init__()
        ctx = _default_ctx(ctx)
        self._own(ctx, core.Z3_mk_params(ctx.ref()))
        for key, value in values.items():
            self.set(key, value)

    def _inc_ref(self, ctx: Context, raw: Any) -> None:
        core.Z3_params_inc_ref(ctx.ref(), raw)

    def _dec_ref(self, ctx: Context, raw: Any) -> None:
        core.Z3_params_dec_ref(ctx.ref(), raw)

    def set(self, key: str, value: Union[bool, int, float, str]) -> "Params":
        ref = self._ref()
        raw = self.get_raw_handle()
        name = core.Z3_mk_string_symbol(ref, check_text(key, "parameter name"))
        if isinstance(value, bool):
            core.Z3_params_set_bool(ref, raw, name, value)
        elif isinstance(value, int):
            if value < 0:
                raise ValueError(f"parameter {key!r} takes unsigned values, got {value}")
            core.Z3_params_set_uint(ref, raw, name, value)
        elif isinstance(value, float):
            core.Z3_params_set_double(ref, raw, name, value)
        elif isinstance(value, str):
            symbol = core.Z3_mk_string_symbol(ref, check_text(value, f"value of {key!r}"))
            core.Z3_params_set_symbol(ref, raw, name, symbol)
        else:
            raise TypeError(f"unsupported parameter type {type(value).__name__} for {key!r}")
        logger.debug("param %s=%r", key, value)
        return self

    def to_string(self) -> str:
        return core.Z3_params_to_string(self._ref(), self.get_raw_handle())

    __str__ = to_string

    def __repr__(self) -> str:
        return f"Params({self.to_string()})"
