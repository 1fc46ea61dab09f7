"""
Schemas - Error Taxonomy
File: errors.py

Purpose: Standard error taxonomy for tree construction, proof extraction
and configuration. Defines a Pydantic model for structured error reporting
and Python exceptions for control flow.

Verification never raises: a wrong proof is reported as ``False``, not as
an exception. Everything here is raised by construction, accessors and
configuration only.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Input Errors
    INVALID_INPUT = "INVALID_INPUT"
    INDEX_OUT_OF_RANGE = "INDEX_OUT_OF_RANGE"

    # Schema & Configuration Errors
    SCHEMA_VALIDATION_ERROR = "SCHEMA_VALIDATION_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class MerkleError(BaseModel):
    """
    Error model for structured error reporting.

    Used by the CLI to emit machine-readable failures and by callers that
    prefer passing errors around without exceptions.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.INVALID_INPUT],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "TxMerkleException":
        """Convert this error model to a raisable exception."""
        return TxMerkleException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class TxMerkleException(Exception):
    """
    Base exception for all txmerkle errors.

    Carries structured error information and converts to/from
    MerkleError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "TXMERKLE_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> MerkleError:
        """Convert this exception to a MerkleError model."""
        return MerkleError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class InvalidInputError(TxMerkleException, ValueError):
    """Raised for an empty record set, an un-encodable record or an unprovable leaf."""

    def __init__(
        self,
        message: str,
        record_index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if record_index is not None:
            full_details["record_index"] = record_index
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_INPUT,
            details=full_details,
            retryable=False,
        )


class IndexOutOfRangeError(TxMerkleException, IndexError):
    """Raised when a position falls outside the hash array or the leaf range."""

    def __init__(
        self,
        index: int,
        size: int,
        message: str | None = None,
    ) -> None:
        super().__init__(
            message=message or f"Index {index} out of range for size {size}",
            code=ErrorCodes.INDEX_OUT_OF_RANGE,
            details={"index": index, "size": size},
            retryable=False,
        )
        self.index = index
        self.size = size


class ConfigurationException(TxMerkleException):
    """Raised for unknown hash algorithms, policies or unreadable config."""

    def __init__(
        self,
        message: str,
        setting: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if setting:
            full_details["setting"] = setting
        super().__init__(
            message=message,
            code=ErrorCodes.CONFIGURATION_ERROR,
            details=full_details,
            retryable=False,
        )


class SchemaValidationException(TxMerkleException):
    """Raised when a serialised tree or proof document is inconsistent."""

    def __init__(
        self,
        message: str,
        field_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if field_path:
            full_details["field_path"] = field_path
        super().__init__(
            message=message,
            code=ErrorCodes.SCHEMA_VALIDATION_ERROR,
            details=full_details,
            retryable=False,
        )


__all__ = [
    "ErrorCodes",
    "MerkleError",
    "TxMerkleException",
    "InvalidInputError",
    "IndexOutOfRangeError",
    "ConfigurationException",
    "SchemaValidationException",
]
