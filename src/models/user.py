"""User-related Pydantic models"""
from pydantic import BaseModel, Field


class User(BaseModel):
    """Signed-in user, as kept in the current session record"""
    id: str
    email: str
    name: str


class StoredAccount(User):
    """Account entry in the local mock user store (password kept as typed)"""
    password: str = Field(..., min_length=1)

    def to_user(self) -> User:
        return User(id=self.id, email=self.email, name=self.name)
