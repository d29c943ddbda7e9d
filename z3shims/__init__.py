"""
z3shims — Ownership-checked wrappers over the Z3 native interface
=================================================================

This package exposes reference-counted native solver handles (terms, term
vectors, fixedpoint contexts, models, solvers) as Python objects that
acquire exactly one native reference when created and give it back exactly
once.  Every object belongs to one :class:`Context`; mixing objects from two
contexts in one operation raises ``ContextMismatchError`` before anything
reaches the native side.

Core modules
------------
context
    Shared-ownership handle to a native environment; per-thread default.
ast
    The ``Ast`` capability and the concrete kinds ``Bool``, ``Int``,
    ``Real``, ``Float`` and ``Dynamic``.
sort
    Sorts and function declarations (relations).
ast_vector
    Native term vectors.
algebraic
    Real algebraic number arithmetic.
polynomial
    Polynomial subresultants.
quantifier_elimination
    Full, light and model-guided quantifier elimination.
solver
    Satisfiability checking and models.
fixedpoint
    Horn-clause rule solving.

Quick start
-----------
>>> from z3shims import Context, Real, Algebraic
>>> ctx = Context()
>>> a = Real.from_rational(3, 2, ctx)
>>> b = Real.from_rational(5, 3, ctx)
>>> Algebraic.eq_algebraic(Algebraic.add(a, b), Real.from_rational(19, 6, ctx))
True

Package layout
--------------
::

    z3shims/
    ├── __init__.py            ← this file
    ├── _native.py
    ├── errors.py
    ├── config.py
    ├── context.py
    ├── handle.py
    ├── ast.py
    ├── sort.py
    ├── ast_vector.py
    ├── algebraic.py
    ├── polynomial.py
    ├── quantifier_elimination.py
    ├── statistics.py
    ├── solver.py
    └── fixedpoint.py
"""

from __future__ import annotations

import importlib
import logging
import sys
from typing import TYPE_CHECKING, List

# ---------------------------------------------------------------------------
# Package metadata
# ---------------------------------------------------------------------------

__version__ = "0.1.0"
__author__ = "z3shims contributors"
__license__ = "MIT"
__all__: List[str] = []          # populated incrementally below

_log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Internal registry: (module_name, list_of_names_to_import)
# ---------------------------------------------------------------------------

_CORE_MODULES = {
    "errors": [
        "ErrorClass",
        "ErrorCategory",
        "ErrorCode",
        "ShimErrorCodes",
        "ShimError",
        "ContractViolation",
        "ContextMismatchError",
        "VectorIndexError",
        "InvalidHandleError",
        "PreconditionError",
        "RecoverableError",
        "EmbeddedNulError",
        "RuleParseError",
        "RuleFileError",
        "ContextCreationError",
    ],
    "config": [
        "ContextConfig",
    ],
    "context": [
        "Context",
        "check_same_context",
    ],
    "handle": [
        "NativeHandle",
    ],
    "ast": [
        "Ast",
        "Bool",
        "Int",
        "Real",
        "Float",
        "Dynamic",
        "forall",
        "exists",
        "wrap_inferred",
    ],
    "sort": [
        "Sort",
        "FuncDecl",
    ],
    "ast_vector": [
        "AstVector",
        "AstVectorIter",
    ],
    "algebraic": [
        "Algebraic",
    ],
    "polynomial": [
        "Polynomial",
    ],
    "quantifier_elimination": [
        "QuantifierElimination",
        "LightQuantifierElimination",
    ],
    "statistics": [
        "Statistics",
        "Params",
    ],
    "solver": [
        "SatResult",
        "Solver",
        "Model",
    ],
    "fixedpoint": [
        "QueryResult",
        "Fixedpoint",
    ],
}


def _import_names(module_rel_name: str, names: List[str]) -> None:
    """Import *names* from a submodule and bind them in the package namespace."""
    fq_name = f"{__name__}.{module_rel_name}"
    try:
        mod = importlib.import_module(fq_name)
    except ImportError as exc:
        raise ImportError(
            f"z3shims: required submodule '{module_rel_name}' "
            f"failed to import: {exc}"
        ) from exc

    current_module = sys.modules[__name__]
    for name in names:
        obj = getattr(mod, name, None)
        if obj is None:
            raise AttributeError(f"z3shims.{module_rel_name} does not export '{name}'")
        setattr(current_module, name, obj)
        __all__.append(name)

    setattr(current_module, module_rel_name, mod)
    if module_rel_name not in __all__:
        __all__.append(module_rel_name)


for _mod, _names in _CORE_MODULES.items():
    _import_names(_mod, _names)

del _mod, _names

# ---------------------------------------------------------------------------
# Package-level utilities
# ---------------------------------------------------------------------------

def list_submodules() -> List[str]:
    """Return the names of all public submodules."""
    return sorted(_CORE_MODULES)


def native_info() -> dict:
    """Metadata about this package and the native engine it drives."""
    from ._native import core

    return {
        "package": __name__,
        "version": __version__,
        "python": sys.version,
        "z3_version": core.Z3_get_full_version(),
        "loaded_submodules": [m for m in list_submodules() if f"{__name__}.{m}" in sys.modules],
    }


__all__ += ["list_submodules", "native_info", "__version__"]

# ---------------------------------------------------------------------------
# TYPE_CHECKING block — gives IDEs full visibility without runtime cost
# ---------------------------------------------------------------------------

if TYPE_CHECKING:
    from .errors import (
        ErrorClass as ErrorClass,
        ErrorCategory as ErrorCategory,
        ErrorCode as ErrorCode,
        ShimErrorCodes as ShimErrorCodes,
        ShimError as ShimError,
        ContractViolation as ContractViolation,
        ContextMismatchError as ContextMismatchError,
        VectorIndexError as VectorIndexError,
        InvalidHandleError as InvalidHandleError,
        PreconditionError as PreconditionError,
        RecoverableError as RecoverableError,
        EmbeddedNulError as EmbeddedNulError,
        RuleParseError as RuleParseError,
        RuleFileError as RuleFileError,
        ContextCreationError as ContextCreationError,
    )
    from .config import ContextConfig as ContextConfig
    from .context import (
        Context as Context,
        check_same_context as check_same_context,
    )
    from .handle import NativeHandle as NativeHandle
    from .ast import (
        Ast as Ast,
        Bool as Bool,
        Int as Int,
        Real as Real,
        Float as Float,
        Dynamic as Dynamic,
        forall as forall,
        exists as exists,
        wrap_inferred as wrap_inferred,
    )
    from .sort import Sort as Sort, FuncDecl as FuncDecl
    from .ast_vector import AstVector as AstVector, AstVectorIter as AstVectorIter
    from .algebraic import Algebraic as Algebraic
    from .polynomial import Polynomial as Polynomial
    from .quantifier_elimination import (
        QuantifierElimination as QuantifierElimination,
        LightQuantifierElimination as LightQuantifierElimination,
    )
    from .statistics import Statistics as Statistics, Params as Params
    from .solver import SatResult as SatResult, Solver as Solver, Model as Model
    from .fixedpoint import QueryResult as QueryResult, Fixedpoint as Fixedpoint
