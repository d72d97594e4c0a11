from typing import Optional

from fastapi import Header

from src.platform.constant.route_constant import USER_ID_HEADER


async def get_current_user_id(
    x_user_id: Optional[str] = Header(default=None, alias=USER_ID_HEADER),
) -> Optional[str]:
    """Caller identity claimed by the request; None means an anonymous caller."""
    if x_user_id is None or not x_user_id.strip():
        return None
    return x_user_id.strip()
