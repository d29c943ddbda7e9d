"""
config.py — Tuning knobs for native solver environments
========================================================

``ContextConfig`` collects the options applied when a ``Context`` creates its
native environment.  Per-object options (fixedpoint engine, solver timeouts)
go through ``statistics.Params`` instead.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

ParamValue = Union[bool, int, float, str]


@dataclass
class ContextConfig:
    """Options for a native environment."""
    model: bool = True
    proof: bool = False
    unsat_core: bool = False
    timeout_ms: Optional[int] = None
    extra: Dict[str, ParamValue] = field(default_factory=dict)

    def validate(self) -> List[str]:
        """Return a list of validation warnings (empty if valid)."""
        warnings: List[str] = []
        if self.timeout_ms is not None and self.timeout_ms <= 0:
            warnings.append("timeout_ms must be positive")
        for key in self.extra:
            if not key or "\x00" in key:
                warnings.append(f"invalid parameter name {key!r}")
        return warnings

    def to_params(self) -> Dict[str, Any]:
        """Native configuration keys, in the form ``z3.Context`` accepts."""
        params: Dict[str, Any] = {
            "model": self.model,
            "proof": self.proof,
            "unsat_core": self.unsat_core,
        }
        if self.timeout_ms is not None:
            params["timeout"] = self.timeout_ms
        params.update(self.extra)
        return params
