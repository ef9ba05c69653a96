"""Category repository. Categories are soft deleted."""

from pocket_ledger.models.audit import AuditEventBuilder
from pocket_ledger.models.ledger import Category, CategoryType
from pocket_ledger.repositories.base import CollectionRepository
from pocket_ledger.services.storage import StorageKeys


class CategoryRepository(CollectionRepository[Category]):
    model = Category
    key = StorageKeys.CATEGORIES
    entity_name = "Category"
    soft_delete = True

    async def get_by_type(
        self,
        category_type: CategoryType,
        include_archived: bool = False,
    ) -> list[Category]:
        return [
            category
            for category in await self.get_all()
            if category.type == category_type and (include_archived or not category.is_archived)
        ]

    async def get_subcategories(self, parent_id: str) -> list[Category]:
        return [
            category
            for category in await self.get_all()
            if category.parent_id == parent_id and not category.is_archived
        ]

    async def _on_deleted(self, entity: Category) -> None:
        await self._audit_logger.log(
            AuditEventBuilder.category_archived(entity.id, entity.name)
        )
