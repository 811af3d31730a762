"""
Application version formatting
"""
import re
from importlib import metadata
from typing import Optional

NOT_AVAILABLE = "N/A"

NON_STABLE_VERSION = re.compile(r'\b(preview|beta|rc|debug|alpha|test|canary|nightly)\b', re.IGNORECASE)


def format_app_version(informational: Optional[str], basic: Optional[str] = None) -> str:
    """
    Format a version string, shortening a trailing git hash

    "1.2.3+4f2a9c81d0" -> "1.2.3 (4f2a9c)"

    Args:
        informational: Full version, optionally with "+<git hash>" local part
        basic: Fallback when informational is missing

    Returns:
        Formatted version, basic, or "N/A"
    """
    if informational is None:
        return basic or NOT_AVAILABLE

    plus_index = informational.find('+')
    if plus_index <= 0:
        return informational

    prefix = informational[:plus_index]
    git_hash = informational[plus_index + 1:]

    if len(git_hash) <= 6:
        return informational

    return f"{prefix} ({git_hash[:6]})"


def get_app_version(distribution: str = "requestguard") -> str:
    """Formatted version of an installed distribution, "N/A" if not installed"""
    try:
        version = metadata.version(distribution)
    except metadata.PackageNotFoundError:
        return NOT_AVAILABLE

    return format_app_version(version)


def is_non_stable_version(version: str) -> bool:
    """True if the version carries a pre-release keyword (beta, rc, nightly...)"""
    return bool(NON_STABLE_VERSION.search(version or ""))
