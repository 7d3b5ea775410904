"""
Tests for the order status state machine and customer mutations.
"""
from datetime import datetime, time
from itertools import product

import pytest

from sandwich_slots.errors import (
    InvalidStateTransition,
    NotFound,
    OrderNotModifiable,
    UnauthorizedOrderAccess,
    ValidationFailed,
)
from sandwich_slots.models import Order, OrderIngredient, OrderStatus
from sandwich_slots.services.admission import create_order
from sandwich_slots.services.lifecycle import (
    can_transition,
    change_order_status,
    delete_order,
    update_order,
)

from tests.helpers import SERVICE_DAY

STATUSES = [s.value for s in OrderStatus]

BEFORE_DEADLINE = datetime.combine(SERVICE_DAY, time(11, 0))
AFTER_DEADLINE = datetime.combine(SERVICE_DAY, time(11, 31))


def _expected(from_status, to_status):
    return to_status != "pending" and from_status != "rejected"


class TestTransitionMatrix:
    """Every (from, to) pair against the rule: never to pending, never out of rejected."""

    @pytest.mark.parametrize("from_status,to_status", list(product(STATUSES, STATUSES)))
    def test_can_transition(self, from_status, to_status):
        assert can_transition(from_status, to_status) is _expected(from_status, to_status)

    def test_skips_and_rollbacks_are_allowed(self):
        assert can_transition("pending", "picked_up")
        assert can_transition("picked_up", "confirmed")
        assert can_transition("ready", "ready")

    def test_pending_is_initial_only(self):
        assert not can_transition("pending", "pending")
        assert not any(can_transition(s, "pending") for s in STATUSES)

    def test_rejected_is_terminal(self):
        assert not any(can_transition("rejected", s) for s in STATUSES)


@pytest.fixture
def order(db_session, make_working_day, users, sandwich):
    # Slot 12:00, deadline 30 minutes -> 11:30
    working_day = make_working_day(deadline_minutes=30)
    return create_order(db_session, users["alice"].id, working_day.time_slots[0].id, sandwich)


def _set_status(db_session, order, status):
    order.status = status
    db_session.commit()


class TestChangeOrderStatus:
    """Operator status changes through the service."""

    @pytest.mark.parametrize("from_status,to_status", list(product(STATUSES, STATUSES)))
    def test_persisted_matrix(self, db_session, order, from_status, to_status):
        _set_status(db_session, order, from_status)

        if _expected(from_status, to_status):
            changed = change_order_status(db_session, order.id, to_status)
            assert changed.status == to_status
        else:
            with pytest.raises(InvalidStateTransition) as exc_info:
                change_order_status(db_session, order.id, to_status)
            assert exc_info.value.details == {"from": from_status, "to": to_status}
            db_session.expire_all()
            assert db_session.get(Order, order.id).status == from_status

    def test_full_pipeline(self, db_session, order):
        for status in ("confirmed", "ready", "picked_up"):
            assert change_order_status(db_session, order.id, status).status == status

    def test_unknown_status(self, db_session, order):
        with pytest.raises(ValidationFailed) as exc_info:
            change_order_status(db_session, order.id, "eaten")
        assert "eaten" in exc_info.value.message

    def test_unknown_order(self, db_session):
        with pytest.raises(NotFound):
            change_order_status(db_session, 9999, "confirmed")


class TestUpdateOrder:
    """Customers replace ingredients of their own pending orders before the deadline."""

    def test_replaces_ingredients(self, db_session, order, users, ingredient_ids):
        selection = [ingredient_ids["Focaccia"], ingredient_ids["Salame"], ingredient_ids["Pesto"]]

        updated = update_order(db_session, order.id, users["alice"].id, selection, now=BEFORE_DEADLINE)

        assert [i.name for i in updated.ingredients] == ["Focaccia", "Salame", "Pesto"]
        assert db_session.query(OrderIngredient).filter_by(order_id=order.id).count() == 3

    def test_keeping_some_ingredients_is_allowed(self, db_session, order, users, ingredient_ids):
        selection = [ingredient_ids["Ciabatta"], ingredient_ids["Lettuce"]]

        updated = update_order(db_session, order.id, users["alice"].id, selection, now=BEFORE_DEADLINE)

        assert [i.name for i in updated.ingredients] == ["Ciabatta", "Lettuce"]

    def test_slot_and_number_do_not_change(self, db_session, order, users, ingredient_ids):
        slot_id, number = order.time_slot_id, order.daily_number

        updated = update_order(
            db_session, order.id, users["alice"].id, [ingredient_ids["Focaccia"]], now=BEFORE_DEADLINE,
        )

        assert (updated.time_slot_id, updated.daily_number) == (slot_id, number)

    def test_other_users_order(self, db_session, order, users, sandwich):
        with pytest.raises(UnauthorizedOrderAccess):
            update_order(db_session, order.id, users["bruno"].id, sandwich, now=BEFORE_DEADLINE)

    def test_after_deadline(self, db_session, order, users, sandwich):
        with pytest.raises(OrderNotModifiable) as exc_info:
            update_order(db_session, order.id, users["alice"].id, sandwich, now=AFTER_DEADLINE)
        assert "11:30" in exc_info.value.message

    def test_exactly_at_deadline(self, db_session, order, users, sandwich):
        at_deadline = datetime.combine(SERVICE_DAY, time(11, 30))
        with pytest.raises(OrderNotModifiable):
            update_order(db_session, order.id, users["alice"].id, sandwich, now=at_deadline)

    def test_confirmed_order(self, db_session, order, users, sandwich):
        _set_status(db_session, order, "confirmed")

        with pytest.raises(OrderNotModifiable) as exc_info:
            update_order(db_session, order.id, users["alice"].id, sandwich, now=BEFORE_DEADLINE)
        assert "already confirmed" in exc_info.value.message

    def test_ownership_is_checked_before_state(self, db_session, order, users, sandwich):
        _set_status(db_session, order, "confirmed")

        with pytest.raises(UnauthorizedOrderAccess):
            update_order(db_session, order.id, users["bruno"].id, sandwich, now=AFTER_DEADLINE)

    def test_invalid_selection_keeps_old_ingredients(self, db_session, order, users, ingredient_ids):
        with pytest.raises(ValidationFailed):
            update_order(
                db_session, order.id, users["alice"].id,
                [ingredient_ids["Salame"]], now=BEFORE_DEADLINE,
            )

        db_session.expire_all()
        names = [i.name for i in db_session.get(Order, order.id).ingredients]
        assert names == ["Ciabatta", "Prosciutto Crudo", "Mozzarella"]

    def test_unknown_order(self, db_session, users, sandwich):
        with pytest.raises(NotFound):
            update_order(db_session, 9999, users["alice"].id, sandwich, now=BEFORE_DEADLINE)


class TestDeleteOrder:
    """Customers cancel their own pending orders before the deadline."""

    def test_deletes_order_and_snapshots(self, db_session, order, users):
        order_id = order.id

        delete_order(db_session, order_id, users["alice"].id, now=BEFORE_DEADLINE)

        assert db_session.get(Order, order_id) is None
        assert db_session.query(OrderIngredient).filter_by(order_id=order_id).count() == 0

    def test_frees_the_place(self, db_session, order, users, sandwich):
        slot_id = order.time_slot_id
        delete_order(db_session, order.id, users["alice"].id, now=BEFORE_DEADLINE)

        # Capacity 2: both places are free again
        create_order(db_session, users["bruno"].id, slot_id, sandwich)
        create_order(db_session, users["bruno"].id, slot_id, sandwich)

    def test_other_users_order(self, db_session, order, users):
        with pytest.raises(UnauthorizedOrderAccess):
            delete_order(db_session, order.id, users["bruno"].id, now=BEFORE_DEADLINE)
        assert db_session.get(Order, order.id) is not None

    def test_after_deadline(self, db_session, order, users):
        with pytest.raises(OrderNotModifiable):
            delete_order(db_session, order.id, users["alice"].id, now=AFTER_DEADLINE)

    def test_rejected_order(self, db_session, order, users):
        _set_status(db_session, order, "rejected")

        with pytest.raises(OrderNotModifiable):
            delete_order(db_session, order.id, users["alice"].id, now=BEFORE_DEADLINE)
