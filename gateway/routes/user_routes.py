"""User lookup API routes."""

from fastapi import APIRouter, Depends, Query

from common.constants import API_PREFIX
from gateway.schemas.users import UsersResponse
from gateway.service_locator import get_user_directory
from gateway.users import UserDirectory
from gateway.utils import envelope, parse_user_ids

router = APIRouter(prefix=f"{API_PREFIX}/users", tags=["Users"])


@router.get("", response_model=UsersResponse)
async def get_users(
    user_ids: str = Query("", description="Comma-separated user ids"),
    directory: UserDirectory = Depends(get_user_directory)
):
    """
    Look up users by id.

    Unknown ids yield a placeholder user named after the id; never fails.
    """
    return envelope(directory.lookup(parse_user_ids(user_ids)))
