from pydantic import BaseModel

from ..domain.vocabulary import Role


class UserRead(BaseModel):
    id: str
    email: str
    name: str
    role: Role

    class Config:
        from_attributes = True
