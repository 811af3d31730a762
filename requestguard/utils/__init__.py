"""
Runtime environment and version helpers
"""
from .environment import (
    is_running_on_azure_app_service,
    is_running_in_container,
    get_environment_tags,
)
from .version import (
    format_app_version,
    get_app_version,
    is_non_stable_version,
)

__all__ = [
    "is_running_on_azure_app_service",
    "is_running_in_container",
    "get_environment_tags",
    "format_app_version",
    "get_app_version",
    "is_non_stable_version",
]
