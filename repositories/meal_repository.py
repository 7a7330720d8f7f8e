"""
Meal Repository - Meal records owned by users
"""

from typing import List, Optional
from datetime import datetime
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import Meal


class MealRepository(BaseRepository[Meal]):
    """Repository for meal data access"""

    def __init__(self, db: Session):
        super().__init__(db, Meal)

    def get_by_user_name(self, user_name: str) -> List[Meal]:
        """Get all meals owned by a user"""
        return self.db.query(Meal).filter(Meal.user_name == user_name).all()

    def create_meal(
        self,
        user_name: str,
        description: Optional[str] = None,
        calories: Optional[int] = None,
        eaten_at: Optional[datetime] = None,
    ) -> Meal:
        """Create a meal for a user"""
        meal = Meal(user_name=user_name, description=description, calories=calories)
        if eaten_at is not None:
            meal.eaten_at = eaten_at
        self.db.add(meal)
        self.db.commit()
        self.db.refresh(meal)
        return meal

    def delete_many(self, meals: List[Meal], commit: bool = True) -> int:
        """Delete the given meals. Returns the number removed."""
        for meal in meals:
            self.db.delete(meal)
        if commit:
            self.db.commit()
        else:
            self.db.flush()
        return len(meals)
