"""
Custom exceptions for telemetry assembly.

Every failure raised while turning a configuration document into a live
runtime derives from ConfigurationError and carries an ErrorKind, so callers
can either catch the whole family or branch on the kind.
"""

from enum import Enum
from typing import Any, List, Optional, Tuple


class ErrorKind(Enum):
    """Categories of configuration failures."""

    UNSUPPORTED_SCHEMA_VERSION = "unsupported_schema_version"
    UNKNOWN_PROVIDER = "unknown_provider"
    INVALID_FIELD_COMBINATION = "invalid_field_combination"
    INVALID_DOCUMENT = "invalid_document"
    RESOURCE_RELEASE_FAILURE = "resource_release_failure"


class ConfigurationError(Exception):
    """
    Base exception for assembly failures.

    If assembly fails after resources were acquired, the ledger is released
    before the error reaches the caller. When that teardown itself fails, the
    aggregate teardown error is attached as ``release_error`` instead of
    replacing this one.
    """

    kind: ErrorKind = ErrorKind.INVALID_FIELD_COMBINATION

    def __init__(self, message: str):
        super().__init__(message)
        self.release_error: Optional["ResourceReleaseError"] = None


class UnsupportedSchemaVersionError(ConfigurationError):
    """
    The document declares a file_format this assembler does not understand.

    Raised by the version gate before anything is acquired, so no teardown
    is ever attached.
    """

    kind = ErrorKind.UNSUPPORTED_SCHEMA_VERSION

    def __init__(self, file_format: Optional[str]):
        super().__init__(
            f"Unsupported file format: {file_format!r}. "
            f"Supported formats include 0.4, 1.0 and 1.0-rc.<n>"
        )
        self.file_format = file_format


class UnknownProviderError(ConfigurationError):
    """No factory is registered for the requested (capability type, name)."""

    kind = ErrorKind.UNKNOWN_PROVIDER

    def __init__(
        self,
        capability_type: Any,
        name: str,
        available: Optional[List[str]] = None,
    ):
        type_name = getattr(capability_type, "value", capability_type)
        super().__init__(
            f"No {type_name} provider named '{name}' is registered. "
            f"Available {type_name} providers: {available or 'none'}"
        )
        self.capability_type = capability_type
        self.name = name


class InvalidFieldCombinationError(ConfigurationError):
    """A resolver or component factory rejected its own sub-configuration."""

    kind = ErrorKind.INVALID_FIELD_COMBINATION


class DocumentParseError(ConfigurationError):
    """
    The input mapping does not fit the configuration document schema.

    The underlying pydantic ValidationError is kept on ``validation_error``.
    """

    kind = ErrorKind.INVALID_DOCUMENT

    def __init__(self, message: str, validation_error: Optional[Exception] = None):
        super().__init__(message)
        self.validation_error = validation_error


class ResourceReleaseError(ConfigurationError):
    """
    One or more resources failed to release.

    Only ever produced by ResourceLedger.release_all(). It is returned rather
    than raised, so teardown always runs to completion.
    """

    kind = ErrorKind.RESOURCE_RELEASE_FAILURE

    def __init__(self, failures: List[Tuple[str, BaseException]]):
        summary = "; ".join(f"{name}: {error}" for name, error in failures)
        super().__init__(f"Failed to release {len(failures)} resource(s): {summary}")
        self.failures = failures


class ProviderRegistrationError(ValueError):
    """
    A factory is already registered under the same (capability type, name).

    Registration happens before assembly, so this is a collaborator error
    rather than a configuration error.
    """

    pass
