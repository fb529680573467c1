"""Request-driven flows through the wired service container."""

from datetime import date, time

import pytest

from millbook.application.dto.requests import (
    AdjustmentRequest,
    CreateSaleRequest,
    CreateSupervisorRequest,
    OwnerSetupRequest,
    RecordInwardRequest,
    RecordProductionRequest,
)
from millbook.core.entities.audit import AuditAction
from millbook.core.entities.stock import ProductType
from millbook.core.entities.user import UserRole
from millbook.core.exceptions import (
    IncorrectPasswordError,
    SaleNotFoundError,
    SystemAlreadyInitializedError,
)


class TestOnboarding:
    async def test_owner_setup_then_supervisor(self, services):
        assert not await services.identity.is_initialized()

        owner = await services.setup_owner.execute(
            OwnerSetupRequest(login_id="Owner", display_name="Mill Owner", password="owner-pass")
        )
        created = await services.create_supervisor.execute(
            owner, CreateSupervisorRequest(display_name="Ravi Kumar", login_id="Ravi")
        )

        assert await services.identity.is_initialized()
        assert owner.role == UserRole.OWNER
        assert created.user.login_id == "ravi"
        assert created.user.is_first_login
        assert len(created.temporary_password) == 8

        with pytest.raises(SystemAlreadyInitializedError):
            await services.setup_owner.execute(
                OwnerSetupRequest(login_id="other", display_name="Other", password="other-pass")
            )

    async def test_first_login_password_change(self, services, owner):
        created = await services.identity.create_supervisor(owner, "Meena", "meena")
        user = await services.identity.login("meena", created.temporary_password)
        assert user.is_first_login

        await services.identity.update_password(user.id, "meena-secret")
        await services.identity.logout()

        again = await services.identity.login("meena", "meena-secret")
        assert not again.is_first_login

        with pytest.raises(IncorrectPasswordError):
            await services.identity.change_password(user.id, "wrong", "another-pass")

        actions = [e.action for e in await services.audit.list_entries()]
        assert AuditAction.RESET_PASSWORD in actions
        assert AuditAction.LOGOUT in actions


class TestDailyOperations:
    async def test_inward_production_and_sales(self, services, owner, supervisor):
        inward = await services.record_inward.execute(
            supervisor,
            RecordInwardRequest(supplier="Farmer Co-op", vehicle_no="KA-05-7788", weight_kg=3000),
        )
        result = await services.record_production.execute(
            supervisor,
            RecordProductionRequest(
                start_time=time(8, 0),
                end_time=time(16, 0),
                raw_consumed_kg=1000,
                oil_produced_kg=400,
                cake_produced_kg=580,
            ),
        )
        owner_sale = await services.create_sale.execute(
            owner,
            CreateSaleRequest(
                product=ProductType.OIL,
                quantity_kg=100,
                buyer_name="Sri Traders",
                rate_per_unit=150,
                salesman_id=supervisor.id,
            ),
        )
        supervisor_sale = await services.create_sale.execute(
            supervisor,
            CreateSaleRequest(
                product=ProductType.CAKE, quantity_kg=80, buyer_name="Dairy Farm", rate_per_unit=30
            ),
        )

        assert inward.weight_kg == 3000
        assert result.entry.raw_consumed_kg == 1000
        assert owner_sale.total_value == 15000.0
        assert owner_sale.salesman_id == supervisor.id
        assert supervisor_sale.rate_per_unit is None
        assert supervisor_sale.total_value is None

        assert (await services.raw_stock.get_raw_stock()).quantity_kg == 2000.0
        stock = await services.ledger.get_finished_stock()
        assert stock.oil_stock_kg == 300.0
        assert stock.cake_stock_kg == 500.0

    async def test_adjustment_request_through_use_case(self, stocked, owner, supervisor):
        request = await stocked.request_adjustment.execute(
            supervisor,
            AdjustmentRequest(product=ProductType.OIL, requested_change=-2.5, reason="Spill"),
        )

        assert request.is_pending
        assert (await stocked.ledger.get_balance(ProductType.OIL)).quantity_kg == 100.0

        await stocked.adjustments.approve(owner, request.id)
        assert (await stocked.ledger.get_balance(ProductType.OIL)).quantity_kg == 97.5


class TestVisibility:
    async def test_supervisor_sees_own_sales_without_prices(self, stocked, owner, supervisor):
        other = (await stocked.identity.create_supervisor(owner, "Meena", "meena")).user
        mine = await stocked.sales.create_sale(supervisor, ProductType.OIL, 10, "Walk-in")
        theirs = await stocked.sales.create_sale(other, ProductType.OIL, 5, "Walk-in")
        priced = await stocked.sales.create_sale(
            owner, ProductType.CAKE, 5, "Dairy Farm", rate_per_unit=30
        )

        visible = await stocked.sales.list_sales(supervisor)
        everything = await stocked.sales.list_sales(owner)

        assert [s.id for s in visible] == [mine.id]
        assert len(everything) == 3
        assert next(s for s in everything if s.id == priced.id).total_value == 150.0
        with pytest.raises(SaleNotFoundError):
            await stocked.sales.get_sale(supervisor, theirs.id)

    async def test_supervisor_production_history(self, services, owner, supervisor):
        await services.raw_stock.record_inward(owner, "Farmer Co-op", 3000)
        await services.production.record_production(
            supervisor, time(8, 0), time(16, 0), 1000, 380, 600
        )
        await services.production.record_production(
            owner, time(16, 0), time(23, 0), 900, 340, 540
        )

        assert len(await services.production.list_entries(supervisor)) == 1
        assert len(await services.production.list_entries(owner)) == 2


class TestDashboard:
    async def test_today_summary(self, services, owner, supervisor):
        today = date(2024, 3, 1)
        await services.raw_stock.record_inward(owner, "Farmer Co-op", 3000)
        for start, end in ((time(6, 0), time(14, 0)), (time(14, 0), time(22, 0))):
            await services.production.record_production(
                owner, start, end, 1000, 380, 600, production_date=today
            )
        await services.production.record_production(
            owner, time(6, 0), time(14, 0), 500, 200, 290, production_date=date(2024, 2, 29)
        )

        stats = await services.reporting.get_dashboard_stats(owner, today=today)

        assert stats.today.shift_count == 2
        assert stats.today.consumed_kg == 2000
        assert stats.today.oil_kg == 760
        assert stats.today.runtime_minutes == 960
        assert stats.today.avg_oil_yield_percent == pytest.approx(38.0)
        assert stats.today.oil_per_hour == pytest.approx(47.5)
        assert stats.raw_stock.quantity_kg == 500.0
        assert stats.finished_stock.oil_stock_kg == 960.0
        assert len(stats.production_history) == 3
        assert len(stats.inward_history) == 1

    async def test_supervisor_dashboard_hides_prices(self, stocked, owner, supervisor):
        await stocked.sales.create_sale(owner, ProductType.OIL, 10, "A", rate_per_unit=150)
        await stocked.sales.create_sale(supervisor, ProductType.OIL, 10, "B")

        stats = await stocked.reporting.get_dashboard_stats(supervisor)

        assert [s.buyer_name for s in stats.sales_history] == ["B"]
        assert stats.today.shift_count == 0
        assert stats.finished_stock.oil_stock_kg == 80.0
