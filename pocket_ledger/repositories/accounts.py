"""Account repository. Accounts are soft deleted so old transactions still resolve."""

from pocket_ledger.models.audit import AuditEventBuilder
from pocket_ledger.models.ledger import Account
from pocket_ledger.repositories.base import CollectionRepository
from pocket_ledger.services.storage import StorageKeys


class AccountRepository(CollectionRepository[Account]):
    model = Account
    key = StorageKeys.ACCOUNTS
    entity_name = "Account"
    soft_delete = True

    async def get_active(self) -> list[Account]:
        """Accounts that have not been archived."""
        return [account for account in await self.get_all() if not account.is_archived]

    async def _on_deleted(self, entity: Account) -> None:
        await self._audit_logger.log(
            AuditEventBuilder.account_archived(entity.id, entity.name)
        )
