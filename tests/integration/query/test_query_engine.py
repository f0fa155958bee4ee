"""QueryEngine 통합 테스트"""

import pytest

from core.errors import ValidationError
from core.query.engine import QueryEngine, TransactionFilter
from core.storage.ledger_store import LedgerStore
from core.types import CurrencyType
from tests.helpers import add_customer, add_tx


@pytest.fixture
def engine(store: LedgerStore) -> QueryEngine:
    return QueryEngine(store)


class TestCustomerQueries:
    """고객 조회"""

    @pytest.mark.asyncio
    async def test_search_and_count_agree(self, store: LedgerStore, engine: QueryEngine) -> None:
        await add_customer(store, "Şükrü", "5321112233")
        await add_customer(store, "Sema", "5329998877")
        await add_customer(store, "Ahmet", "5551112233")
        deleted = await add_customer(store, "Şahin")
        await store.delete_customer(deleted)

        found = await engine.search_customers("ş")

        assert [c.name for c in found] == ["Şükrü"]
        assert await engine.count_customers("ş") == 1
        assert [c.name for c in await engine.search_customers("112233")] == ["Ahmet", "Şükrü"]
        assert await engine.count_customers("112233") == 2

    @pytest.mark.asyncio
    async def test_pages_cover_all_once(self, store: LedgerStore, engine: QueryEngine) -> None:
        for name in ["Deniz", "Can", "Ece", "Burak", "Ayla"]:
            await add_customer(store, name)

        first = await engine.list_customers_page(page=0, page_size=2)
        second = await engine.list_customers_page(page=1, page_size=2)
        third = await engine.list_customers_page(page=2, page_size=2)

        names = [c.name for page in (first, second, third) for c in page.items]
        assert names == ["Ayla", "Burak", "Can", "Deniz", "Ece"]
        assert first.total_count == 5
        assert first.total_pages == 3
        assert not third.has_next

    @pytest.mark.asyncio
    async def test_page_sorted_by_phone_descending(self, store: LedgerStore, engine: QueryEngine) -> None:
        await add_customer(store, "A", "5000000001")
        await add_customer(store, "B", "5000000003")
        await add_customer(store, "C", "5000000002")

        page = await engine.list_customers_page(sort_field="phone", sort_direction="DESCENDING")

        assert [c.name for c in page.items] == ["B", "C", "A"]

    @pytest.mark.asyncio
    async def test_invalid_page(self, engine: QueryEngine) -> None:
        with pytest.raises(ValidationError):
            await engine.list_customers_page(page=-1)

    @pytest.mark.asyncio
    async def test_neighbor_navigation(self, store: LedgerStore, engine: QueryEngine) -> None:
        cem = await add_customer(store, "Cem")
        ayla = await add_customer(store, "Ayla")
        cicek = await add_customer(store, "Çiçek")

        assert await engine.get_previous_customer_id(ayla.id) is None
        assert await engine.get_next_customer_id(ayla.id) == cem.id
        assert await engine.get_next_customer_id(cem.id) == cicek.id
        assert await engine.get_previous_customer_id(cicek.id) == cem.id
        assert await engine.get_next_customer_id(cicek.id) is None
        assert await engine.get_next_customer_id(9999) is None


class TestTransactionQueries:
    """거래 조회"""

    @pytest.mark.asyncio
    async def test_count_matches_page_total(self, store: LedgerStore, engine: QueryEngine) -> None:
        customer = await add_customer(store, "Ali")
        other = await add_customer(store, "Veli")
        for day in range(1, 6):
            await add_tx(store, customer.id, "1", day=day)
        await add_tx(store, customer.id, "1", is_hidden=True)
        await add_tx(store, other.id, "1")

        criteria = TransactionFilter(customer_id=customer.id)
        page = await engine.list_transactions_page(criteria, page=0, page_size=3)

        assert await engine.count_transactions(criteria) == 5
        assert page.total_count == 5
        assert [tx.date.day for tx in page.items] == [5, 4, 3]

        hidden_too = TransactionFilter(customer_id=customer.id, include_hidden=True)
        assert await engine.count_transactions(hidden_too) == 6
        assert await engine.count_transactions() == 6

    @pytest.mark.asyncio
    async def test_unknown_sort_field(self, store: LedgerStore, engine: QueryEngine) -> None:
        customer = await add_customer(store, "Ali")
        await add_tx(store, customer.id, "1", day=1)
        await add_tx(store, customer.id, "1", day=9)

        page = await engine.list_transactions_page(sort_field="bogus", sort_direction="ASCENDING")

        assert [tx.date.day for tx in page.items] == [9, 1]

    @pytest.mark.asyncio
    async def test_filters(self, store: LedgerStore, engine: QueryEngine) -> None:
        customer = await add_customer(store, "Ali")
        await add_tx(store, customer.id, "1", currency=CurrencyType.GOLD_22K, description="Künye")
        await add_tx(store, customer.id, "1", currency=CurrencyType.GOLD_22K, is_deposit=True)
        await add_tx(store, customer.id, "1")

        gold = TransactionFilter(currency=CurrencyType.GOLD_22K)
        assert await engine.count_transactions(gold) == 2

        no_deposits = TransactionFilter(currency=CurrencyType.GOLD_22K, include_deposits=False)
        assert await engine.count_transactions(no_deposits) == 1

        page = await engine.list_transactions_page(TransactionFilter(search="KÜNYE"))
        assert [tx.description for tx in page.items] == ["Künye"]
