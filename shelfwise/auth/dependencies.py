"""Authentication dependencies for FastAPI.

Sign-in happens upstream; the identity provider leaves the user's opaque id
in the signed session cookie.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status


async def get_optional_user_id(request: Request) -> str | None:
    """Get current user id from session if logged in."""
    user_id = request.session.get("user_id")
    if not user_id:
        return None
    return str(user_id)


async def get_current_user_id(
    user_id: Annotated[str | None, Depends(get_optional_user_id)],
) -> str:
    """Get current user id, raising 401 if not authenticated."""
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return user_id
