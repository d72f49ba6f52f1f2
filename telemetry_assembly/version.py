"""
Schema version gate for configuration documents.

Only explicitly supported file formats are accepted; an unknown version is
rejected outright instead of being interpreted with today's semantics.
"""

import logging
import re
from typing import Optional

from .exceptions import UnsupportedSchemaVersionError

logger = logging.getLogger(__name__)

SUPPORTED_FILE_FORMATS = re.compile(r"0\.4|1\.0(-rc\.\d+)?")


def is_supported_file_format(file_format: Optional[str]) -> bool:
    """Return True if file_format is a version this package can assemble."""
    if not isinstance(file_format, str):
        return False
    return SUPPORTED_FILE_FORMATS.fullmatch(file_format) is not None


def check_file_format(file_format: Optional[str]) -> str:
    """
    Validate a document's declared file_format.

    Args:
        file_format: Value of the document's ``file_format`` field

    Returns:
        The accepted file_format

    Raises:
        UnsupportedSchemaVersionError: If the value is missing or unsupported
    """
    if not is_supported_file_format(file_format):
        raise UnsupportedSchemaVersionError(file_format)

    if "-rc." in file_format:
        logger.warning(
            f"Assembling release candidate file format {file_format}; "
            f"experimental properties may differ from the final 1.0 schema"
        )
    return file_format
