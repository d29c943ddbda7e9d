# z3shims/errors.py
"""
Error Types for the z3shims Safety Layer

Every failure raised by this package derives from ``ShimError`` and carries a
structured ``ErrorCode``.  Failures are split by how callers are expected to
react to them.

Error Hierarchy:
────────────────
┌─────────────────────────────────────────────────────────────────────────────┐
│  ShimError (base)                                                           │
│  ├── ContractViolation      - programmer errors, not meant to be retried    │
│  │   ├── ContextMismatchError  - operands from different contexts           │
│  │   ├── VectorIndexError      - index outside the current vector length    │
│  │   ├── InvalidHandleError    - null handle passed to wrap()               │
│  │   └── PreconditionError     - documented precondition violated           │
│  ├── RecoverableError       - resource / parse failures                     │
│  │   ├── EmbeddedNulError      - string argument holds a NUL byte           │
│  │   ├── RuleParseError        - malformed rule-language text               │
│  │   └── RuleFileError         - unreadable rule file                       │
│  └── ContextCreationError   - native environment could not be created       │
└─────────────────────────────────────────────────────────────────────────────┘

Error Codes:
────────────
Codes follow the pattern Z3S-NNNN:
  - 1000-1999: contract violations
  - 2000-2999: recoverable resource / parse failures
  - 9000-9999: fatal environment failures

Solver outcomes (an ``UNKNOWN`` query, a formula quantifier elimination could
not simplify) are values, never exceptions.
"""

from __future__ import annotations

from enum import Enum, auto, unique
from typing import Optional

__all__ = [
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
]


# ═══════════════════════════════════════════════════════════════════════════════
# CLASSIFICATION
# ═══════════════════════════════════════════════════════════════════════════════

@unique
class ErrorClass(Enum):
    """How a failure is meant to be handled by calling code."""

    PROGRAMMER = "programmer"   # defect at the call site
    RESOURCE = "resource"       # bad input or I/O; caller decides
    FATAL = "fatal"             # nothing can proceed


@unique
class ErrorCategory(Enum):
    CONTEXT_MISMATCH = auto()
    INDEX_OUT_OF_BOUNDS = auto()
    NULL_HANDLE = auto()
    PRECONDITION = auto()
    EMBEDDED_NUL = auto()
    PARSE_FAILURE = auto()
    IO_FAILURE = auto()
    ENVIRONMENT = auto()


class ErrorCode:
    """
    Structured error code: ``PREFIX-NNNN`` plus its category and class.
    """

    __slots__ = ("prefix", "number", "category", "error_class")

    def __init__(
        self,
        prefix: str,
        number: int,
        category: ErrorCategory,
        error_class: ErrorClass,
    ) -> None:
        self.prefix = prefix
        self.number = number
        self.category = category
        self.error_class = error_class

    @property
    def code(self) -> str:
        return f"{self.prefix}-{self.number:04d}"

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"ErrorCode({self.code!r}, {self.category.name})"

    def __hash__(self) -> int:
        return hash((self.prefix, self.number))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ErrorCode):
            return self.prefix == other.prefix and self.number == other.number
        if isinstance(other, str):
            return self.code == other
        return False


class ShimErrorCodes:
    """Predefined error codes."""

    # CONTRACT VIOLATIONS (1000-1999)
    CONTEXT_MISMATCH = ErrorCode(
        "Z3S", 1000, ErrorCategory.CONTEXT_MISMATCH, ErrorClass.PROGRAMMER
    )
    INDEX_OUT_OF_BOUNDS = ErrorCode(
        "Z3S", 1001, ErrorCategory.INDEX_OUT_OF_BOUNDS, ErrorClass.PROGRAMMER
    )
    NULL_HANDLE = ErrorCode(
        "Z3S", 1002, ErrorCategory.NULL_HANDLE, ErrorClass.PROGRAMMER
    )
    PRECONDITION = ErrorCode(
        "Z3S", 1003, ErrorCategory.PRECONDITION, ErrorClass.PROGRAMMER
    )

    # RECOVERABLE (2000-2999)
    EMBEDDED_NUL = ErrorCode(
        "Z3S", 2000, ErrorCategory.EMBEDDED_NUL, ErrorClass.RESOURCE
    )
    PARSE_FAILURE = ErrorCode(
        "Z3S", 2001, ErrorCategory.PARSE_FAILURE, ErrorClass.RESOURCE
    )
    IO_FAILURE = ErrorCode(
        "Z3S", 2002, ErrorCategory.IO_FAILURE, ErrorClass.RESOURCE
    )

    # FATAL (9000-9999)
    CONTEXT_CREATION = ErrorCode(
        "Z3S", 9000, ErrorCategory.ENVIRONMENT, ErrorClass.FATAL
    )


# ═══════════════════════════════════════════════════════════════════════════════
# EXCEPTIONS
# ═══════════════════════════════════════════════════════════════════════════════

class ShimError(Exception):
    """
    Base exception for all z3shims errors.

    Carries an ``ErrorCode`` and an optional hint that is appended to the
    rendered message.
    """

    default_code: ErrorCode = ShimErrorCodes.PRECONDITION

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        hint: str = "",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.hint = hint

    @property
    def error_class(self) -> ErrorClass:
        return self.code.error_class

    @property
    def recoverable(self) -> bool:
        return self.code.error_class is ErrorClass.RESOURCE

    def with_hint(self, hint: str) -> "ShimError":
        self.hint = hint
        return self

    def __str__(self) -> str:
        text = f"{self.code}: {self.message}"
        if self.hint:
            text += f" (hint: {self.hint})"
        return text


# ───────────────────────────────────────────────────────────────────────────────
# PROGRAMMER ERRORS
# ───────────────────────────────────────────────────────────────────────────────

class ContractViolation(ShimError):
    """A defect in calling code.  Not designed to be caught and retried."""


class ContextMismatchError(ContractViolation):
    default_code = ShimErrorCodes.CONTEXT_MISMATCH


class VectorIndexError(ContractViolation, IndexError):
    default_code = ShimErrorCodes.INDEX_OUT_OF_BOUNDS

    def __init__(self, index: int, length: int) -> None:
        super().__init__(f"index {index} out of bounds for vector of length {length}")
        self.index = index
        self.length = length


class InvalidHandleError(ContractViolation):
    default_code = ShimErrorCodes.NULL_HANDLE


class PreconditionError(ContractViolation):
    default_code = ShimErrorCodes.PRECONDITION


# ───────────────────────────────────────────────────────────────────────────────
# RECOVERABLE ERRORS
# ───────────────────────────────────────────────────────────────────────────────

class RecoverableError(ShimError):
    """Bad input or I/O failure; the caller decides whether to retry."""


class EmbeddedNulError(RecoverableError, ValueError):
    default_code = ShimErrorCodes.EMBEDDED_NUL


class RuleParseError(RecoverableError):
    default_code = ShimErrorCodes.PARSE_FAILURE


class RuleFileError(RecoverableError):
    default_code = ShimErrorCodes.IO_FAILURE

    def __init__(self, message: str, path: str = "", hint: str = "") -> None:
        super().__init__(message, hint=hint)
        self.path = path


# ───────────────────────────────────────────────────────────────────────────────
# FATAL
# ───────────────────────────────────────────────────────────────────────────────

class ContextCreationError(ShimError):
    default_code = ShimErrorCodes.CONTEXT_CREATION
