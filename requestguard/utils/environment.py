"""
Runtime environment detection
"""
import os
import re
from typing import List

TAG_PATTERN = re.compile(r'^[a-zA-Z0-9-#@$()\[\]/]+$')


def is_running_on_azure_app_service() -> bool:
    """True when WEBSITE_SITE_NAME is set (Azure App Service sets it automatically)"""
    return bool(os.getenv("WEBSITE_SITE_NAME", "").strip())


def is_running_in_container() -> bool:
    """True when RUNNING_IN_CONTAINER is "true" (set in the container image)"""
    return os.getenv("RUNNING_IN_CONTAINER") == "true"


def get_environment_tags(variable: str = "APP_TAGS") -> List[str]:
    """
    Read comma-separated tags from an environment variable

    Tags are trimmed and must match TAG_PATTERN (letters, digits and - # @ $ ( ) [ ] /);
    invalid tags are dropped.

    Returns:
        Valid tags, or [""] if the variable is unset or blank

    Example:
        APP_TAGS="prod,api-v1,feature#123" -> ["prod", "api-v1", "feature#123"]
    """
    raw = os.getenv(variable)
    if not raw or not raw.strip():
        return [""]

    return [tag.strip() for tag in raw.split(",") if TAG_PATTERN.match(tag.strip())]
