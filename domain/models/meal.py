"""
Meal records owned by a user.
"""

from sqlalchemy import Column, Integer, String, Text, TIMESTAMP, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from domain.models.database import Base


class Meal(Base):
    """A meal logged against one user, referenced by user name"""

    __tablename__ = "meal"

    meal_id = Column(Integer, primary_key=True, autoincrement=True)
    user_name = Column(
        String(64),
        ForeignKey("app_user.user_name"),
        nullable=False,
        index=True,
    )
    description = Column(Text)
    calories = Column(Integer)
    eaten_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    user = relationship("AppUser", back_populates="meals")
