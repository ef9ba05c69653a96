"""
Budget and goal repositories.

Nothing references a budget or a goal, so both are hard deleted.
"""

from pocket_ledger.models.ledger import Budget, Goal
from pocket_ledger.repositories.base import CollectionRepository
from pocket_ledger.services.storage import StorageKeys


class BudgetRepository(CollectionRepository[Budget]):
    model = Budget
    key = StorageKeys.BUDGETS
    entity_name = "Budget"

    async def get_for_category(self, category_id: str) -> list[Budget]:
        return [budget for budget in await self.get_all() if budget.category_id == category_id]


class GoalRepository(CollectionRepository[Goal]):
    model = Goal
    key = StorageKeys.GOALS
    entity_name = "Goal"

    async def get_active(self) -> list[Goal]:
        return [goal for goal in await self.get_all() if not goal.is_archived and not goal.is_completed]
