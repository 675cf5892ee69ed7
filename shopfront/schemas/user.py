from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from datetime import datetime


class SignupInput(BaseModel):
    # Checked by the auth service so both signup transports share one set of rules
    name: str = ""
    email: str = ""
    password: str = ""


class LoginInput(BaseModel):
    email: str = ""
    password: str = ""


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    email: str
    created_at: datetime


class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
