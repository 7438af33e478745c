from datetime import datetime
from typing import Optional

from sqlalchemy import Column, DateTime
from sqlmodel import Field, SQLModel


class UserReward(SQLModel, table=True):
    __tablename__ = "user_rewards"

    # autoincrement id keeps the per-user insertion order
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    available_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))
    expires_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))
    redeemed_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime(timezone=True), nullable=True)
    )
