"""Tests for transaction intake, listing and revision."""

from datetime import datetime, timedelta, timezone

import pytest

from crud import transactions
from errors import NotFoundError, ValidationError
from models.transactions import Transaction, TransactionDirection
from schemas.inventory import Item as ItemSnapshot
from schemas.transactions import Transaction as TransactionSnapshot

INBOUND = TransactionDirection.INBOUND
OUTBOUND = TransactionDirection.OUTBOUND


def _snapshot(store):
    items = sorted(
        (ItemSnapshot.model_validate(i).model_dump() for i in store.get_all("items")), key=lambda d: d["id"]
    )
    txs = sorted(
        (TransactionSnapshot.model_validate(t).model_dump() for t in store.get_all("transactions")),
        key=lambda d: d["id"],
    )
    return items, txs


class TestRecordTransaction:

    def test_scenario_inbound_then_overdraw_then_drain(self, store, make_item, quantity_of, admin):
        item = make_item(code="M-001", quantity=20)

        transactions.record_transaction(store, item.id, INBOUND, 5, admin)
        assert quantity_of(item.id) == 25

        with pytest.raises(ValidationError):
            transactions.record_transaction(store, item.id, OUTBOUND, 30, admin)
        assert quantity_of(item.id) == 25

        transactions.record_transaction(store, item.id, OUTBOUND, 25, admin)
        assert quantity_of(item.id) == 0

    def test_overdraw_leaves_store_untouched(self, store, make_item, admin):
        item = make_item(quantity=3)
        transactions.record_transaction(store, item.id, INBOUND, 2, admin)
        before = _snapshot(store)

        with pytest.raises(ValidationError) as exc:
            transactions.record_transaction(store, item.id, OUTBOUND, 6, admin)

        assert exc.value.field == "quantity"
        assert "(5)" in exc.value.message
        assert _snapshot(store) == before

    def test_inbound_has_no_stock_ceiling(self, store, make_item, quantity_of, admin):
        item = make_item(quantity=0)
        transactions.record_transaction(store, item.id, INBOUND, 1000, admin)
        assert quantity_of(item.id) == 1000

    def test_record_denormalizes_item_and_user(self, store, make_item, clerk):
        item = make_item(code="G-10", name="Sterile Gloves", quantity=50)

        tx = transactions.record_transaction(store, item.id, "OUTBOUND", 4, clerk, note="ER shift")

        assert tx.item_id == item.id
        assert tx.item_name == "Sterile Gloves"
        assert tx.direction == OUTBOUND
        assert tx.user_id == clerk.id
        assert tx.username == "Ward Nurse"
        assert tx.note == "ER shift"
        assert tx.timestamp is not None

    def test_timestamp_is_utc_and_survives_a_round_trip(self, store, make_item, admin):
        item = make_item(quantity=0)

        tx = transactions.record_transaction(store, item.id, INBOUND, 2, admin)
        fetched = transactions.get_transaction(store, tx.id)

        assert fetched.timestamp.tzinfo is not None
        assert fetched.timestamp.utcoffset() == timedelta(0)
        assert fetched.timestamp == tx.timestamp

    @pytest.mark.parametrize("quantity", [0, -3, 2.5, "4", True])
    def test_rejects_non_positive_or_non_integer_quantity(self, store, make_item, admin, quantity):
        item = make_item(quantity=10)
        before = _snapshot(store)

        with pytest.raises(ValidationError):
            transactions.record_transaction(store, item.id, INBOUND, quantity, admin)

        assert _snapshot(store) == before

    def test_requires_item_selection(self, store, admin):
        with pytest.raises(ValidationError) as exc:
            transactions.record_transaction(store, "", INBOUND, 1, admin)
        assert exc.value.field == "item_id"

    def test_unknown_item(self, store, admin):
        with pytest.raises(NotFoundError):
            transactions.record_transaction(store, "missing", INBOUND, 1, admin)
        assert store.get_all("transactions") == []

    def test_unknown_direction(self, store, make_item, admin):
        item = make_item(quantity=1)
        with pytest.raises(ValidationError):
            transactions.record_transaction(store, item.id, "SIDEWAYS", 1, admin)


class TestListTransactions:

    def _put(self, store, item_name, direction, minutes_ago, username="Admin"):
        store.put("transactions", Transaction(
            id=f"{item_name}-{minutes_ago}",
            item_id="some-item",
            item_name=item_name,
            direction=direction,
            quantity=1,
            timestamp=datetime.now(timezone.utc) - timedelta(minutes=minutes_ago),
            user_id="u",
            username=username,
        ))

    def test_sorted_newest_first(self, store):
        self._put(store, "Gauze", INBOUND, 30)
        self._put(store, "Syringe", OUTBOUND, 5)
        self._put(store, "Mask", INBOUND, 60)

        names = [t.item_name for t in transactions.list_transactions(store)]

        assert names == ["Syringe", "Gauze", "Mask"]

    def test_search_and_direction_filter(self, store):
        self._put(store, "Gauze", INBOUND, 30, username="Nurse Amal")
        self._put(store, "Syringe", OUTBOUND, 5)
        self._put(store, "Gauze pads", OUTBOUND, 10)

        assert {t.item_name for t in transactions.list_transactions(store, search="gauze")} == {"Gauze", "Gauze pads"}
        assert [t.item_name for t in transactions.list_transactions(store, search="amal")] == ["Gauze"]
        outbound = transactions.list_transactions(store, direction=OUTBOUND)
        assert [t.item_name for t in outbound] == ["Syringe", "Gauze pads"]


class TestReviseTransaction:

    def test_revise_quantity(self, store, make_item, quantity_of, admin):
        item = make_item(quantity=10)
        tx = transactions.record_transaction(store, item.id, INBOUND, 5, admin)

        revised = transactions.revise_transaction(store, tx.id, 8)

        assert revised.quantity == 8
        assert revised.direction == INBOUND
        assert quantity_of(item.id) == 18
        assert transactions.get_transaction(store, tx.id).quantity == 8

    def test_revise_direction(self, store, make_item, quantity_of, admin):
        item = make_item(quantity=40)
        tx = transactions.record_transaction(store, item.id, INBOUND, 10, admin)
        assert quantity_of(item.id) == 50

        transactions.revise_transaction(store, tx.id, 10, OUTBOUND)

        assert quantity_of(item.id) == 30

    def test_same_values_change_nothing(self, store, make_item, quantity_of, admin):
        item = make_item(quantity=10)
        tx = transactions.record_transaction(store, item.id, OUTBOUND, 4, admin)

        transactions.revise_transaction(store, tx.id, 4)

        assert quantity_of(item.id) == 6

    def test_revision_may_not_drive_stock_negative(self, store, make_item, quantity_of, admin):
        item = make_item(quantity=10)
        tx = transactions.record_transaction(store, item.id, OUTBOUND, 4, admin)

        with pytest.raises(ValidationError):
            transactions.revise_transaction(store, tx.id, 11)

        assert quantity_of(item.id) == 6
        assert transactions.get_transaction(store, tx.id).quantity == 4

    def test_rejects_non_positive_quantity(self, store, make_item, admin):
        item = make_item(quantity=10)
        tx = transactions.record_transaction(store, item.id, INBOUND, 4, admin)

        with pytest.raises(ValidationError):
            transactions.revise_transaction(store, tx.id, 0)

    def test_unknown_transaction(self, store):
        with pytest.raises(NotFoundError):
            transactions.revise_transaction(store, "missing", 3)
