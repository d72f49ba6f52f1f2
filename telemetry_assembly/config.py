"""
Options controlling how an assembled runtime is installed in the process.

These are not part of the configuration document: the document describes
what to build, the options describe what the caller does with the result.
"""

from dataclasses import dataclass
from typing import Any, Dict

DEFAULT_FLUSH_TIMEOUT_MILLIS = 30_000


@dataclass
class AssemblyOptions:
    """
    Process-level options for create().

    activate_global: install the providers and propagator as the
        OpenTelemetry globals after a successful assembly
    shutdown_on_exit: register the runtime's shutdown with atexit
    flush_timeout_millis: default timeout for AssembledRuntime.force_flush()
    """

    activate_global: bool = False
    shutdown_on_exit: bool = False
    flush_timeout_millis: int = DEFAULT_FLUSH_TIMEOUT_MILLIS

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "activate_global": self.activate_global,
            "shutdown_on_exit": self.shutdown_on_exit,
            "flush_timeout_millis": self.flush_timeout_millis,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AssemblyOptions":
        """Deserialize from dictionary."""
        return cls(
            activate_global=data.get("activate_global", False),
            shutdown_on_exit=data.get("shutdown_on_exit", False),
            flush_timeout_millis=data.get(
                "flush_timeout_millis", DEFAULT_FLUSH_TIMEOUT_MILLIS
            ),
        )

    def validate(self) -> None:
        """Validate options."""
        if self.flush_timeout_millis <= 0:
            raise ValueError("flush_timeout_millis must be positive")
