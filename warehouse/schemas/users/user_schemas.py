from pydantic import BaseModel, Field
from typing import Optional, List, Literal
from datetime import datetime

Role = Literal["admin", "warehouse", "receiver", "user"]


# =========================
# CREATE
# =========================
class UserCreateSchema(BaseModel):
    username: str = Field(min_length=3, max_length=150)
    password: str = Field(min_length=6)
    name: str = Field(min_length=1, max_length=150)
    role: Role = "user"


# =========================
# RESPONSE SCHEMAS
# =========================
class UserOut(BaseModel):
    id: int
    username: str
    name: str
    role: str
    is_active: bool
    last_login: Optional[datetime]
    created_at: datetime

    class Config:
        from_attributes = True


class UserListData(BaseModel):
    total: int
    items: List[UserOut]
