from sqlmodel import SQLModel
from .reward import UserReward
