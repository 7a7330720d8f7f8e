"""
User-related database models.
"""

from sqlalchemy import Column, Integer, String, TIMESTAMP, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from domain.models.database import Base
from domain.enums import Role


class AppUser(Base):
    """User account model"""

    __tablename__ = "app_user"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_name = Column(String(64), unique=True, nullable=False, index=True)
    name = Column(String(255))
    password_hash = Column(String(255), nullable=False)
    role = Column(
        SQLEnum(Role, values_callable=lambda roles: [r.value for r in roles]),
        nullable=False,
        default=Role.USER,
    )
    calorie_target = Column(Integer, nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    meals = relationship("Meal", back_populates="user", passive_deletes=True)

    def __repr__(self) -> str:
        return f"<AppUser user_name={self.user_name!r} role={self.role}>"
