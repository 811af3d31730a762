"""
Validation predicates
"""
from .validators import (
    is_not_empty_guid,
    is_not_default_value,
    require_not_empty_guid,
    require_not_default_value,
)

__all__ = [
    "is_not_empty_guid",
    "is_not_default_value",
    "require_not_empty_guid",
    "require_not_default_value",
]
