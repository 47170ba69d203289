from typing import Optional

from .constants import SDK_NAME, SDK_VERSION


def user_agent_value(component: Optional[str] = None) -> str:
    if component:
        return f"{SDK_NAME}/{component}/{SDK_VERSION}"
    return f"{SDK_NAME}/{SDK_VERSION}"
