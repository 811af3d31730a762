"""
Validation predicates
=====================

Plain predicates for "not empty" / "not default" checks, called explicitly
by request handlers or from pydantic field validators.

Neither predicate implies "required": None is always considered valid.
"""
import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

NOT_EMPTY_MESSAGE = "The {0} field must not be empty"
NOT_DEFAULT_MESSAGE = "The {0} field must not have the default value"

# Value types and their default (zero) values
DEFAULT_VALUES = {
    bool: False,
    int: 0,
    float: 0.0,
    complex: 0j,
    Decimal: Decimal(0),
    UUID: UUID(int=0),
    datetime.timedelta: datetime.timedelta(0),
}


def is_not_empty_guid(value: Any) -> bool:
    """
    Validate that a UUID is not the nil UUID

    Returns:
        False only for UUID('00000000-0000-0000-0000-000000000000');
        True for None and for non-UUID values
    """
    if value is None:
        return True

    if isinstance(value, UUID):
        return value != UUID(int=0)

    return True


def is_not_default_value(value: Any) -> bool:
    """
    Validate that a value type instance is not its type's default

    Returns:
        False for 0, 0.0, False, nil UUID, zero timedelta and the like;
        True for None and for any other object
    """
    if value is None:
        return True

    value_type = type(value)
    if value_type not in DEFAULT_VALUES:
        return True

    return value != DEFAULT_VALUES[value_type]


def require_not_empty_guid(value: Any, field_name: str = "value") -> Any:
    """Return value unchanged or raise ValueError, for use in pydantic field validators"""
    if not is_not_empty_guid(value):
        raise ValueError(NOT_EMPTY_MESSAGE.format(field_name))
    return value


def require_not_default_value(value: Any, field_name: str = "value") -> Any:
    """Return value unchanged or raise ValueError, for use in pydantic field validators"""
    if not is_not_default_value(value):
        raise ValueError(NOT_DEFAULT_MESSAGE.format(field_name))
    return value
