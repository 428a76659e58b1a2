"""Pydantic schemas for the user lookup endpoint."""

from typing import List
from pydantic import BaseModel

from gateway.schemas.common import Envelope


class UserModel(BaseModel):
    id: str
    name: str
    avatar_url: str = ""


class UsersResponse(Envelope):
    data: List[UserModel]
