from pydantic import BaseModel, field_validator

from ...domain.entities import RegistrationInput

class RegisterReq(BaseModel):
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone_number: str = ""
    password: str = ""
    date_of_birth: str = ""

    # null и отсутствующее поле - пустая строка, дальше решает валидатор
    @field_validator("*", mode="before")
    @classmethod
    def null_as_empty(cls, v):
        return "" if v is None else v

    def to_input(self) -> RegistrationInput:
        return RegistrationInput(**self.model_dump())

class MessageResp(BaseModel):
    message: str
