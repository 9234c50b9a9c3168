from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    full_name: Optional[str] = None
    email: str = Field(index=True, unique=True)
    mobile_number: Optional[str] = None
    password: str
    role: str = Field(default="customer")  # admin | staff | customer
    can_login: bool = Field(default=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
