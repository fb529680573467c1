"""Tests for SQLiteSalesStore."""

from datetime import date

import pytest

from millbook.core.entities.sale import BuyerType, SaleStatus, SalesEntry
from millbook.core.entities.stock import ProductType
from millbook.core.time_utils import utcnow
from millbook.infrastructure.storage.sqlite.sales_store import SQLiteSalesStore


@pytest.fixture
def store(pool) -> SQLiteSalesStore:
    return SQLiteSalesStore(pool)


def make_sale(entered_by_id: str = "u1", **overrides) -> SalesEntry:
    fields = dict(
        product=ProductType.OIL,
        quantity_kg=40.0,
        buyer_name="Sri Traders",
        buyer_type=BuyerType.WHOLESALER,
        vehicle_no="KA-01-1234",
        rate_per_unit=150.0,
        total_value=6000.0,
        entered_by="Mill Owner",
        entered_by_id=entered_by_id,
        salesman_name="Mill Owner",
        salesman_id=entered_by_id,
    )
    fields.update(overrides)
    return SalesEntry(**fields)


class TestSQLiteSalesStore:
    async def test_roundtrip(self, store):
        sale = make_sale(sale_date=date(2024, 3, 1))
        await store.create_sale(sale)

        loaded = await store.get_sale(sale.id)

        assert loaded == sale

    async def test_unpriced_sale(self, store):
        sale = make_sale(rate_per_unit=None, total_value=None, vehicle_no=None)
        await store.create_sale(sale)

        loaded = await store.get_sale(sale.id)

        assert loaded.rate_per_unit is None
        assert loaded.total_value is None

    async def test_cancel_update(self, store):
        sale = make_sale()
        await store.create_sale(sale)
        sale.status = SaleStatus.CANCELLED
        sale.cancellation_reason = "Buyer returned"
        sale.cancelled_by = "Mill Owner"
        sale.cancelled_at = utcnow()

        await store.update_sale(sale)
        loaded = await store.get_sale(sale.id)

        assert loaded.is_cancelled
        assert loaded.cancellation_reason == "Buyer returned"
        assert loaded.cancelled_at == sale.cancelled_at

    async def test_list_in_entry_order(self, store):
        first = make_sale(buyer_name="A")
        second = make_sale(buyer_name="B", entered_by_id="u2")
        third = make_sale(buyer_name="C")
        for sale in (first, second, third):
            await store.create_sale(sale)

        everything = await store.list_sales()
        mine = await store.list_sales(entered_by_id="u1")
        page = await store.list_sales(limit=1, offset=1)

        assert [s.buyer_name for s in everything] == ["A", "B", "C"]
        assert [s.buyer_name for s in mine] == ["A", "C"]
        assert [s.buyer_name for s in page] == ["B"]
