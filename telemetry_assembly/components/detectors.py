"""
Built-in resource detectors.
"""

from typing import Any, Dict

from opentelemetry.sdk.resources import ProcessResourceDetector, ResourceDetector

from ..exceptions import InvalidFieldCombinationError


def create_process_detector(config: Dict[str, Any]) -> ResourceDetector:
    if config:
        raise InvalidFieldCombinationError(
            f"Resource detector 'process' takes no configuration, got {sorted(config)}"
        )
    return ProcessResourceDetector()
