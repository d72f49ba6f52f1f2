"""
Small parsing helpers shared by resolvers and component factories.
"""

from typing import Dict, Optional
from urllib.parse import unquote


def parse_key_value_list(value: Optional[str], what: str = "entry") -> Dict[str, str]:
    """
    Parse a 'key1=value1,key2=value2' string.

    Values are URL-decoded, keys and values are stripped, empty entries are
    skipped. Later keys win.

    Raises:
        ValueError: If an entry has no '=' or an empty key
    """
    result: Dict[str, str] = {}
    if not value:
        return result

    for entry in value.split(","):
        entry = entry.strip()
        if not entry:
            continue
        key, sep, raw = entry.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ValueError(f"Invalid {what} '{entry}', expected key=value")
        result[key] = unquote(raw.strip())
    return result
