"""Stock integrity under failure and concurrency."""

import asyncio
from datetime import time
from unittest.mock import patch

import pytest

from millbook.core.entities.audit import AuditAction
from millbook.core.entities.stock import ProductType
from millbook.core.exceptions import (
    ForbiddenError,
    InsufficientRawStockError,
    InsufficientStockError,
    InvalidDurationError,
    ValidationError,
)
from millbook.infrastructure.storage.sqlite import (
    SQLiteFinishedStockStore,
    SQLiteProductionStore,
)


async def snapshot(services):
    stock = await services.ledger.get_finished_stock()
    raw = await services.raw_stock.get_raw_stock()
    return raw.quantity_kg, stock.oil_stock_kg, stock.cake_stock_kg


class TestLedgerReconstruction:
    async def test_replay_matches_counters(self, stocked, owner, supervisor):
        await stocked.raw_stock.record_inward(owner, "Farmer Co-op", 2000)
        await stocked.production.record_production(
            supervisor, time(8, 0), time(16, 0), 1000, 380.25, 590.5
        )
        sale = await stocked.sales.create_sale(owner, ProductType.OIL, 120.1, "Sri Traders")
        await stocked.sales.create_sale(supervisor, ProductType.CAKE, 33.33, "Dairy Farm")
        await stocked.sales.cancel_sale(owner, sale.id, "Returned")
        adjustment = await stocked.adjustments.request_adjustment(
            supervisor, ProductType.OIL, -0.15, "Sampling"
        )
        await stocked.adjustments.approve(owner, adjustment.id)

        report = await stocked.ledger.verify_ledger()

        for product, expected in ((ProductType.OIL, 480.1), (ProductType.CAKE, 607.17)):
            result = report[product]
            assert result.is_consistent
            assert result.broken_entry_ids == []
            assert result.counter_kg == pytest.approx(expected)
            assert result.replayed_kg == pytest.approx(result.counter_kg)

    async def test_fresh_database_is_consistent(self, services):
        report = await services.ledger.verify_ledger()

        assert all(r.is_consistent and r.entry_count == 0 for r in report.values())

    async def test_tampered_counter_is_reported(self, stocked):
        async with stocked.pool.transaction() as conn:
            await conn.execute(
                "UPDATE finished_stock SET quantity_kg = 999 WHERE product = 'oil'"
            )

        report = await stocked.ledger.verify_ledger()

        assert not report[ProductType.OIL].is_consistent
        assert report[ProductType.CAKE].is_consistent


class TestNonNegativity:
    async def test_selling_everything_then_one_more(self, stocked, owner):
        await stocked.sales.create_sale(owner, ProductType.CAKE, 50, "Dairy Farm")
        assert (await stocked.ledger.get_balance(ProductType.CAKE)).quantity_kg == 0.0

        with pytest.raises(InsufficientStockError):
            await stocked.sales.create_sale(owner, ProductType.CAKE, 0.01, "Dairy Farm")

    async def test_sale_just_over_balance(self, stocked, owner):
        with pytest.raises(InsufficientStockError):
            await stocked.sales.create_sale(owner, ProductType.OIL, 100.004, "Sri Traders")

        assert (await stocked.ledger.get_balance(ProductType.OIL)).quantity_kg == 100.0
        assert await stocked.sales.list_sales(owner) == []

    async def test_sale_below_stock_precision(self, services, owner):
        with pytest.raises(ValidationError):
            await services.sales.create_sale(owner, ProductType.CAKE, 0.004, "Dairy Farm")

        assert await services.ledger.list_ledger() == []
        assert await services.sales.list_sales(owner) == []

    async def test_sale_record_matches_ledger_row(self, stocked, owner):
        sale = await stocked.sales.create_sale(owner, ProductType.OIL, 99.996, "Sri Traders")

        row = (await stocked.ledger.list_ledger(ProductType.OIL, limit=1))[0]
        assert sale.quantity_kg == 100.0
        assert row.quantity_change == -sale.quantity_kg
        assert row.balance_after == 0.0
        assert (await stocked.sales.get_sale(owner, sale.id)).quantity_kg == 100.0

    async def test_crushing_more_than_raw_stock(self, services, owner, supervisor):
        await services.raw_stock.record_inward(owner, "Farmer Co-op", 500)
        before = await snapshot(services)

        with pytest.raises(InsufficientRawStockError):
            await services.production.record_production(
                supervisor, time(8, 0), time(16, 0), 600, 200, 350
            )

        assert await snapshot(services) == before
        assert await services.production.list_entries(owner) == []

    async def test_zero_runtime_rejected(self, services, owner, supervisor):
        await services.raw_stock.record_inward(owner, "Farmer Co-op", 500)

        with pytest.raises(InvalidDurationError):
            await services.production.record_production(
                supervisor, time(8, 0), time(9, 0), 100, 30, 60, breakdown_minutes=60
            )

        assert (await services.raw_stock.get_raw_stock()).quantity_kg == 500.0


class TestAtomicity:
    async def test_production_rolls_back_when_entry_write_fails(
        self, services, owner, supervisor
    ):
        await services.raw_stock.record_inward(owner, "Farmer Co-op", 1000)
        before = await snapshot(services)
        audit_before = await services.audit.list_entries(action=AuditAction.ENTRY_CREATE)

        with patch.object(
            SQLiteProductionStore, "add_entry", side_effect=RuntimeError("disk full")
        ):
            with pytest.raises(RuntimeError, match="disk full"):
                await services.production.record_production(
                    supervisor, time(8, 0), time(16, 0), 1000, 380, 600
                )

        assert await snapshot(services) == before
        assert await services.ledger.list_ledger() == []
        assert await services.audit.list_entries(action=AuditAction.ENTRY_CREATE) == audit_before

    async def test_sale_rolls_back_when_ledger_write_fails(self, stocked, owner):
        before = await snapshot(stocked)

        with patch.object(
            SQLiteFinishedStockStore, "append_ledger_entry", side_effect=RuntimeError("boom")
        ):
            with pytest.raises(RuntimeError):
                await stocked.sales.create_sale(owner, ProductType.OIL, 40, "Sri Traders")

        assert await snapshot(stocked) == before
        assert await stocked.sales.list_sales(owner) == []
        assert (await stocked.ledger.verify_ledger())[ProductType.OIL].is_consistent


class TestConcurrentSales:
    async def test_only_available_stock_is_sold(self, stocked, owner):
        results = await asyncio.gather(
            *(
                stocked.sales.create_sale(owner, ProductType.OIL, 40, f"Buyer {i}")
                for i in range(3)
            ),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, Exception)]
        assert len(failures) == 1
        assert isinstance(failures[0], InsufficientStockError)
        assert (await stocked.ledger.get_balance(ProductType.OIL)).quantity_kg == 20.0
        assert len(await stocked.sales.list_sales(owner)) == 2
        assert (await stocked.ledger.verify_ledger())[ProductType.OIL].is_consistent


class TestRoleGating:
    async def test_supervisor_cannot_act_as_owner(self, stocked, owner, supervisor):
        sale = await stocked.sales.create_sale(supervisor, ProductType.OIL, 10, "Walk-in")
        request = await stocked.adjustments.request_adjustment(
            supervisor, ProductType.OIL, 5, "Recount"
        )
        before = await snapshot(stocked)

        with pytest.raises(ForbiddenError):
            await stocked.sales.cancel_sale(supervisor, sale.id, "mistake")
        with pytest.raises(ForbiddenError):
            await stocked.adjustments.approve(supervisor, request.id)
        with pytest.raises(ForbiddenError):
            await stocked.adjustments.reject(supervisor, request.id)
        with pytest.raises(ForbiddenError):
            await stocked.identity.create_supervisor(supervisor, "Other", "other")
        with pytest.raises(ForbiddenError):
            await stocked.identity.toggle_status(supervisor, owner.id)

        assert await snapshot(stocked) == before
        assert (await stocked.adjustments.get_adjustment(request.id)).is_pending
