from pydantic import BaseModel, Field

from notes_api.domain.user import User


class UserRequest(BaseModel):
    # policy checks (length, character classes) live in the domain factory
    login: str = Field(max_length=255)
    password: str = Field(max_length=128)
    name: str = Field(default="", max_length=255)
    surname: str = Field(default="", max_length=255)


class UserOut(BaseModel):
    id: int
    login: str
    name: str
    surname: str

    @classmethod
    def from_entity(cls, user: User) -> "UserOut":
        return cls(id=user.id, login=user.login, name=user.name, surname=user.surname)


class CreatedResponse(BaseModel):
    id: int
