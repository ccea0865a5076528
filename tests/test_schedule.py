"""Weekly hours, date exceptions and removal rules."""
from datetime import date, time, timedelta

import pytest

from app.errors import AuthorizationError, ConflictError, NotFound, ValidationError
from app.schemas import Creator, ExceptionCreate, ExceptionKind
from tests.conftest import MONDAY


class TestWorkingHours:
    def test_upsert_creates_then_updates(self, manager, stores, shop):
        created = manager.upsert_working_hours(shop.tenant.id, shop.bruno.id, 2, time(9, 0), time(18, 0))
        updated = manager.upsert_working_hours(shop.tenant.id, shop.bruno.id, 2, time(10, 0), time(19, 0))

        assert updated.id == created.id
        assert (updated.open_time, updated.close_time) == (time(10, 0), time(19, 0))
        assert len(stores.hours.list_for(shop.tenant.id, shop.bruno.id)) == 1

    def test_tenant_default_week(self, manager, stores, shop):
        hours = manager.upsert_working_hours(shop.tenant.id, None, 6, time(8, 0), time(13, 0))

        assert hours.professional_id is None
        assert stores.hours.find_tenant_default(shop.tenant.id, 6).id == hours.id

    def test_upsert_reactivates(self, manager, stores, shop):
        manager.deactivate_working_hours(shop.tenant.id, shop.ana.id, 1)
        assert stores.hours.find_active(shop.ana.id, 1) is None

        hours = manager.upsert_working_hours(shop.tenant.id, shop.ana.id, 1, time(9, 0), time(12, 0))

        assert hours.active

    @pytest.mark.parametrize("weekday", [0, 8])
    def test_weekday_out_of_range(self, manager, shop, weekday):
        with pytest.raises(ValidationError):
            manager.upsert_working_hours(shop.tenant.id, shop.ana.id, weekday, time(9, 0), time(12, 0))

    def test_open_must_precede_close(self, manager, shop):
        with pytest.raises(ValidationError):
            manager.upsert_working_hours(shop.tenant.id, shop.ana.id, 3, time(12, 0), time(9, 0))

    def test_professional_of_another_tenant(self, manager, shop):
        with pytest.raises(AuthorizationError):
            manager.upsert_working_hours(shop.tenant.id, shop.outsider.id, 3, time(9, 0), time(12, 0))

    def test_deactivate_missing_day(self, manager, shop):
        with pytest.raises(NotFound):
            manager.deactivate_working_hours(shop.tenant.id, shop.ana.id, 5)


class TestExceptions:
    def test_closed_day_drops_times(self, manager, shop):
        exception = manager.create_exception(
            shop.ana.id, MONDAY, ExceptionKind.CLOSED, time(9, 0), time(10, 0), "holiday", Creator.TENANT
        )

        assert exception.open_time is None
        assert exception.close_time is None
        assert exception.active

    def test_special_hours_need_both_times(self, manager, shop):
        with pytest.raises(ValidationError):
            manager.create_exception(
                shop.ana.id, MONDAY, ExceptionKind.SPECIAL_HOURS, time(10, 0), None, "", Creator.TENANT
            )

    def test_special_hours_need_ordered_times(self, manager, shop):
        with pytest.raises(ValidationError):
            manager.create_exception(
                shop.ana.id, MONDAY, ExceptionKind.SPECIAL_HOURS, time(11, 0), time(10, 0), "", Creator.TENANT
            )

    def test_second_exception_same_date(self, manager, shop):
        manager.create_exception(shop.ana.id, MONDAY, ExceptionKind.CLOSED, None, None, "", Creator.TENANT)

        with pytest.raises(ConflictError):
            manager.create_exception(
                shop.ana.id, MONDAY, ExceptionKind.SPECIAL_HOURS, time(10, 0), time(11, 0), "", Creator.PROFESSIONAL
            )

    def test_date_is_free_again_after_removal(self, manager, shop):
        first = manager.create_exception(shop.ana.id, MONDAY, ExceptionKind.CLOSED, None, None, "", Creator.TENANT)
        manager.remove_exception(first.id, shop.tenant.id, Creator.TENANT)

        second = manager.create_exception(
            shop.ana.id, MONDAY, ExceptionKind.SPECIAL_HOURS, time(10, 0), time(11, 0), "", Creator.TENANT
        )

        assert second.id != first.id

    def test_unknown_professional(self, manager, shop):
        with pytest.raises(NotFound):
            manager.create_exception(999, MONDAY, ExceptionKind.CLOSED, None, None, "", Creator.TENANT)

    def test_batch_is_all_or_nothing(self, manager, stores, shop):
        with pytest.raises(ConflictError):
            manager.create_exceptions_batch(shop.ana.id, [
                ExceptionCreate(date=MONDAY, kind=ExceptionKind.CLOSED),
                ExceptionCreate(date=MONDAY + timedelta(days=7), kind=ExceptionKind.CLOSED),
                ExceptionCreate(date=MONDAY, kind=ExceptionKind.CLOSED),
            ], Creator.PROFESSIONAL)

        assert stores.exceptions.list_active(shop.ana.id) == []

    def test_batch_creates_every_item(self, manager, shop):
        created = manager.create_exceptions_batch(shop.ana.id, [
            ExceptionCreate(date=date(2025, 12, 24), kind=ExceptionKind.SPECIAL_HOURS,
                            open_time=time(9, 0), close_time=time(10, 0)),
            ExceptionCreate(date=date(2025, 12, 25), kind=ExceptionKind.CLOSED, reason="Christmas"),
        ], Creator.PROFESSIONAL)

        assert [e.kind for e in created] == [ExceptionKind.SPECIAL_HOURS, ExceptionKind.CLOSED]
        assert all(e.created_by == Creator.PROFESSIONAL for e in created)


class TestRemoveBlock:
    def _block(self, guard, shop, creator):
        return guard.create_block(shop.ana.id, MONDAY, time(10, 0), time(11, 0), "", creator)

    def test_professional_removes_own_block(self, guard, manager, stores, shop):
        block = self._block(guard, shop, Creator.PROFESSIONAL)

        manager.remove_block(block.id, shop.ana.id, Creator.PROFESSIONAL)

        assert stores.blocks.get(block.id) is None

    def test_professional_cannot_remove_tenant_block(self, guard, manager, shop):
        block = self._block(guard, shop, Creator.TENANT)

        with pytest.raises(AuthorizationError):
            manager.remove_block(block.id, shop.ana.id, Creator.PROFESSIONAL)

    def test_professional_cannot_remove_colleague_block(self, guard, manager, shop):
        block = self._block(guard, shop, Creator.PROFESSIONAL)

        with pytest.raises(AuthorizationError):
            manager.remove_block(block.id, shop.bruno.id, Creator.PROFESSIONAL)

    def test_tenant_removes_any_block_of_its_professionals(self, guard, manager, stores, shop):
        block = self._block(guard, shop, Creator.PROFESSIONAL)

        manager.remove_block(block.id, shop.tenant.id, Creator.TENANT)

        assert stores.blocks.get(block.id) is None

    def test_other_tenant_cannot_remove(self, guard, manager, shop):
        block = self._block(guard, shop, Creator.TENANT)

        with pytest.raises(AuthorizationError):
            manager.remove_block(block.id, shop.other_tenant.id, Creator.TENANT)

    def test_unknown_block(self, manager, shop):
        with pytest.raises(NotFound):
            manager.remove_block(999, shop.tenant.id, Creator.TENANT)


class TestRemoveException:
    def test_professional_removes_own_exception(self, manager, stores, shop):
        exception = manager.create_exception(
            shop.ana.id, MONDAY, ExceptionKind.CLOSED, None, None, "", Creator.PROFESSIONAL
        )

        manager.remove_exception(exception.id, shop.ana.id, Creator.PROFESSIONAL)

        assert stores.exceptions.find_active(shop.ana.id, MONDAY) is None
        assert stores.exceptions.get(exception.id).active is False

    def test_professional_cannot_remove_tenant_exception(self, manager, shop):
        exception = manager.create_exception(
            shop.ana.id, MONDAY, ExceptionKind.CLOSED, None, None, "", Creator.TENANT
        )

        with pytest.raises(AuthorizationError):
            manager.remove_exception(exception.id, shop.ana.id, Creator.PROFESSIONAL)

    def test_removed_exception_is_not_found(self, manager, shop):
        exception = manager.create_exception(
            shop.ana.id, MONDAY, ExceptionKind.CLOSED, None, None, "", Creator.TENANT
        )
        manager.remove_exception(exception.id, shop.tenant.id, Creator.TENANT)

        with pytest.raises(NotFound):
            manager.remove_exception(exception.id, shop.tenant.id, Creator.TENANT)
