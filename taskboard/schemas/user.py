from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class UserBase(BaseModel):
    username: str

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class User(UserBase):
    """Stored account record, persisted under the ``users`` key."""
    id: str
    hashed_password: str


class SessionUser(UserBase):
    """The signed-in user as kept under ``currentUser``; never carries credentials."""
    id: str
