from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime


class StoreSetting(SQLModel, table=True):
    __tablename__ = "store_settings"

    id: Optional[int] = Field(default=None, primary_key=True)
    key: str = Field(index=True, unique=True)
    value: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    updated_at: datetime = Field(default_factory=datetime.utcnow)
