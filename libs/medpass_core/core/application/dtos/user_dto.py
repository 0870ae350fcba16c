from pydantic import BaseModel, EmailStr


class LoginDTO(BaseModel):
    email: EmailStr
    password: str


class UserDTO(BaseModel):
    email: EmailStr
    name: str
    password: str
    role: str = "unidade"
    unit_id: str | None = None
