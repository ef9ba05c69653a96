"""Tests for reference checks at the transaction repository boundary."""

from decimal import Decimal

import pytest

from pocket_ledger.models import Category, CategoryType
from pocket_ledger.orchestrator import AppComponents
from pocket_ledger.validation import TransactionValidationError
from tests.factories import expense, income, make_account, transfer


class TestTransactionValidator:
    """Tests for TransactionValidator through the repository."""

    @pytest.mark.asyncio
    async def test_unknown_account_rejected(self, ledger):
        """Nothing is stored when the account does not exist."""
        with pytest.raises(TransactionValidationError, match="Account ghost does not exist"):
            await ledger.transactions.add(income("ghost", "10"))

        assert await ledger.transactions.get_all() == []

    @pytest.mark.asyncio
    async def test_archived_account_rejected(self, ledger):
        account = await ledger.accounts.add(make_account("Old", "10"))
        await ledger.accounts.delete(account.id)

        with pytest.raises(TransactionValidationError, match="is archived"):
            await ledger.transactions.add(expense(account.id, "1"))

    @pytest.mark.asyncio
    async def test_transfer_reports_both_sides(self, ledger):
        """Every problem is reported in one error."""
        with pytest.raises(TransactionValidationError) as excinfo:
            await ledger.transactions.add(transfer("x", "y", "5"))

        assert excinfo.value.issues == [
            "Source account x does not exist",
            "Destination account y does not exist",
        ]

    @pytest.mark.asyncio
    async def test_category_type_must_match(self, ledger):
        account = await ledger.accounts.add(make_account("A", "10"))
        salary = await ledger.categories.add(Category(name="Salary", type=CategoryType.INCOME))

        with pytest.raises(TransactionValidationError, match="cannot be used on an expense"):
            await ledger.transactions.add(expense(account.id, "1", category_id=salary.id))

        created = await ledger.transactions.add(income(account.id, "1", category_id=salary.id))
        assert created.category_id == salary.id

    @pytest.mark.asyncio
    async def test_update_is_validated(self, ledger):
        """An edit pointing at a missing account leaves the old version and balance in place."""
        account = await ledger.accounts.add(make_account("A", "10"))
        tx = await ledger.transactions.add(expense(account.id, "4"))

        with pytest.raises(TransactionValidationError):
            await ledger.transactions.update(tx.model_copy(update={"account_id": "ghost"}))

        assert await ledger.transactions.get_all() == [tx]
        assert (await ledger.accounts.get_by_id(account.id)).current_balance == Decimal("6")

    @pytest.mark.asyncio
    async def test_validation_can_be_disabled(self, store, audit_logger):
        """Without a validator, stale ids are stored and skipped by the engine."""
        ledger = AppComponents(store, audit_logger, validate_references=False)
        account = await ledger.accounts.add(make_account("A", "10"))

        await ledger.transactions.add(income("ghost", "10"))

        assert len(await ledger.transactions.get_all()) == 1
        assert (await ledger.accounts.get_by_id(account.id)).current_balance == Decimal("10")
