"""Tests for the rent ledger calculator."""

from datetime import date

import pytest

from rent_ledger.ledger import (
    FirstDuePolicy,
    LedgerFilters,
    compute_due_rows,
    compute_ledger,
    first_due_month,
    summarize_month,
)
from rent_ledger.models.rental import BillingStatus, PaymentRecord, Room, Tenant


def _payment(tenant_id: int, month: str, amount: int = 3000, paid_on: date | None = None, **kwargs) -> PaymentRecord:
    return PaymentRecord(
        tenant_id=tenant_id,
        room_number=kwargs.pop("room_number", "101"),
        month=month,
        amount=amount,
        paid_date=paid_on or date(2024, 1, 1),
        **kwargs,
    )


class TestComputeDueRows:
    """Tests for compute_due_rows."""

    def test_paid_overdue_and_pending(self, tenant: Tenant, room: Room, february_payment: PaymentRecord) -> None:
        """Test the status of each month for a mid-month joiner."""
        rows = compute_due_rows(
            tenant, [room], [february_payment], "2024-04", today=date(2024, 4, 3)
        )

        assert [row.month for row in rows] == ["2024-02", "2024-03", "2024-04"]
        assert [row.status for row in rows] == [
            BillingStatus.PAID,
            BillingStatus.OVERDUE,
            BillingStatus.PENDING,
        ]
        assert rows[0].payment is february_payment
        assert rows[1].due_date == date(2024, 3, 5)
        assert rows[1].days_overdue == 29
        assert rows[2].days_overdue == 0
        assert all(row.due_amount == 3000 for row in rows)

    def test_due_date_itself_is_not_overdue(self, tenant: Tenant, room: Room) -> None:
        rows = compute_due_rows(tenant, [room], [], "2024-02", today=date(2024, 2, 5))
        assert rows[-1].status == BillingStatus.PENDING
        assert rows[-1].days_overdue == 0

    def test_paid_row_never_overdue(self, tenant: Tenant, room: Room, february_payment: PaymentRecord) -> None:
        rows = compute_due_rows(tenant, [room], [february_payment], "2024-02", today=date(2025, 1, 1))
        assert rows[0].is_paid
        assert rows[0].days_overdue == 0

    @pytest.mark.parametrize(
        ("join_date", "cutoff", "expected"),
        [
            (date(2024, 1, 15), "2024-04", 3),
            (date(2023, 11, 30), "2024-02", 3),
            (date(2024, 3, 1), "2024-03", 0),
            (date(2024, 5, 1), "2024-03", 0),
        ],
    )
    def test_row_count(self, room: Room, join_date: date, cutoff: str, expected: int) -> None:
        """Test one row per month from the month after joining through the cutoff."""
        tenant = Tenant(name="T", room_number="101", join_date=join_date, id=1)
        rows = compute_due_rows(tenant, [room], [], cutoff, today=date(2024, 4, 20))
        assert len(rows) == expected

    def test_join_on_month_end(self, room: Room) -> None:
        """Test that joining on January 31 starts billing in February."""
        tenant = Tenant(name="T", room_number="101", join_date=date(2024, 1, 31), id=1)
        rows = compute_due_rows(tenant, [room], [], "2024-03", today=date(2024, 1, 31))
        assert [row.month for row in rows] == ["2024-02", "2024-03"]

    def test_join_month_policy_bills_join_month(self, tenant: Tenant, room: Room) -> None:
        rows = compute_due_rows(
            tenant,
            [room],
            [],
            "2024-04",
            today=date(2024, 4, 3),
            policy=FirstDuePolicy.JOIN_MONTH,
        )
        assert [row.month for row in rows] == ["2024-01", "2024-02", "2024-03", "2024-04"]

    def test_due_day_clamped_to_month_end(self, tenant: Tenant, room: Room) -> None:
        rows = compute_due_rows(tenant, [room], [], "2024-02", today=date(2024, 1, 20), due_day=31)
        assert rows[0].due_date == date(2024, 2, 29)

    @pytest.mark.parametrize(("rent", "capacity"), [(9000, 3), (9001, 3), (9002, 3)])
    def test_per_person_rent_is_floored(self, tenant: Tenant, rent: int, capacity: int) -> None:
        room = Room(room_number="101", monthly_rent=rent, capacity=capacity)
        rows = compute_due_rows(tenant, [room], [], "2024-02", today=date(2024, 2, 1))
        assert rows[0].due_amount == 3000

    def test_zero_capacity_room_owes_nothing(self, tenant: Tenant) -> None:
        room = Room(room_number="101", monthly_rent=9000, capacity=0)
        rows = compute_due_rows(tenant, [room], [], "2024-02", today=date(2024, 2, 1))
        assert rows[0].due_amount == 0

    def test_missing_join_date(self, room: Room) -> None:
        tenant = Tenant(name="T", room_number="101", join_date=None, id=1)
        assert compute_due_rows(tenant, [room], [], "2024-04", today=date(2024, 4, 1)) == []

    def test_malformed_join_date(self, room: Room) -> None:
        tenant = Tenant(name="T", room_number="101", join_date="someday", id=1)  # type: ignore[arg-type]
        assert compute_due_rows(tenant, [room], [], "2024-04", today=date(2024, 4, 1)) == []

    def test_string_join_date_accepted(self, room: Room) -> None:
        tenant = Tenant(name="T", room_number="101", join_date="2024-01-15", id=1)  # type: ignore[arg-type]
        rows = compute_due_rows(tenant, [room], [], "2024-02", today=date(2024, 2, 1))
        assert [row.month for row in rows] == ["2024-02"]

    def test_missing_room(self, tenant: Tenant) -> None:
        other = Room(room_number="202", monthly_rent=5000, capacity=1)
        assert compute_due_rows(tenant, [other], [], "2024-04", today=date(2024, 4, 1)) == []

    def test_rooms_as_mapping(self, tenant: Tenant, room: Room) -> None:
        rows = compute_due_rows(tenant, {"101": room}, [], "2024-02", today=date(2024, 2, 1))
        assert len(rows) == 1

    def test_cutoff_defaults_to_today(self, tenant: Tenant, room: Room) -> None:
        rows = compute_due_rows(tenant, [room], [], today=date(2024, 3, 10))
        assert rows[-1].month == "2024-03"

    def test_duplicate_payments_first_wins(self, tenant: Tenant, room: Room) -> None:
        first = _payment(7, "2024-02", amount=3000, id=1)
        second = _payment(7, "2024-02", amount=1, id=2)
        rows = compute_due_rows(tenant, [room], [first, second], "2024-02", today=date(2024, 3, 1))
        assert len(rows) == 1
        assert rows[0].payment is first

    def test_other_tenants_payments_ignored(self, tenant: Tenant, room: Room) -> None:
        rows = compute_due_rows(tenant, [room], [_payment(8, "2024-02")], "2024-02", today=date(2024, 3, 1))
        assert rows[0].status == BillingStatus.OVERDUE

    def test_payment_matched_by_tenant_not_room(self, tenant: Tenant, room: Room) -> None:
        """Test a payment recorded against a previous room still counts."""
        payment = _payment(7, "2024-02", room_number="999")
        rows = compute_due_rows(tenant, [room], [payment], "2024-02", today=date(2024, 3, 1))
        assert rows[0].is_paid

    def test_idempotent(self, tenant: Tenant, room: Room, february_payment: PaymentRecord) -> None:
        args = (tenant, [room], [february_payment], "2024-04")
        assert compute_due_rows(*args, today=date(2024, 4, 3)) == compute_due_rows(
            *args, today=date(2024, 4, 3)
        )

    def test_inputs_not_mutated(self, tenant: Tenant, room: Room, february_payment: PaymentRecord) -> None:
        payments = [february_payment]
        compute_due_rows(tenant, [room], payments, "2024-04", today=date(2024, 4, 3))
        assert payments == [february_payment]
        assert room.occupied == 1

    def test_first_due_month(self) -> None:
        assert first_due_month(date(2024, 12, 31)) == date(2025, 1, 1)
        assert first_due_month(date(2024, 12, 31), FirstDuePolicy.JOIN_MONTH) == date(2024, 12, 1)


class TestComputeLedger:
    """Tests for compute_ledger."""

    @pytest.fixture
    def tenants(self) -> list[Tenant]:
        return [
            Tenant(name="Asha", room_number="101", join_date=date(2024, 1, 15), id=1),
            Tenant(name="Bilal", room_number="102", join_date=date(2024, 2, 10), id=2),
            Tenant(name="Chen", room_number="101", join_date=date(2023, 12, 1), is_active=False, id=3),
        ]

    @pytest.fixture
    def rooms(self) -> list[Room]:
        return [
            Room(room_number="101", monthly_rent=9000, capacity=3, id=1),
            Room(room_number="102", monthly_rent=6000, capacity=1, id=2),
        ]

    def test_rows_grouped_by_tenant_in_order(self, tenants: list[Tenant], rooms: list[Room]) -> None:
        rows = compute_ledger(tenants, rooms, [], LedgerFilters(cutoff_month="2024-03"), today=date(2024, 3, 1))
        assert [(row.tenant.id, row.month) for row in rows] == [
            (1, "2024-02"),
            (1, "2024-03"),
            (2, "2024-03"),
            (3, "2024-01"),
            (3, "2024-02"),
            (3, "2024-03"),
        ]

    def test_active_only(self, tenants: list[Tenant], rooms: list[Room]) -> None:
        filters = LedgerFilters(cutoff_month="2024-03", active_only=True)
        rows = compute_ledger(tenants, rooms, [], filters, today=date(2024, 3, 1))
        assert {row.tenant.id for row in rows} == {1, 2}

    def test_tenant_and_room_filters(self, tenants: list[Tenant], rooms: list[Room]) -> None:
        today = date(2024, 3, 1)
        by_tenant = compute_ledger(tenants, rooms, [], LedgerFilters(tenant_id=2), today=today)
        by_room = compute_ledger(tenants, rooms, [], LedgerFilters(room_number="101"), today=today)
        assert {row.tenant.id for row in by_tenant} == {2}
        assert {row.tenant.id for row in by_room} == {1, 3}

    def test_month_filter(self, tenants: list[Tenant], rooms: list[Room]) -> None:
        rows = compute_ledger(tenants, rooms, [], LedgerFilters(month="2024-02"), today=date(2024, 3, 20))
        assert [(row.tenant.id, row.month) for row in rows] == [(1, "2024-02"), (3, "2024-02")]

    def test_month_filter_with_whitespace(self, tenants: list[Tenant], rooms: list[Room]) -> None:
        """Test a padded month key selects the same rows as the plain key."""
        rows = compute_ledger(tenants, rooms, [], LedgerFilters(month=" 2024-03 "), today=date(2024, 4, 1))
        assert [(row.tenant.id, row.month) for row in rows] == [(1, "2024-03"), (2, "2024-03"), (3, "2024-03")]

    def test_future_month_filter(self, tenants: list[Tenant], rooms: list[Room]) -> None:
        """Test that filtering a future month still returns its rows."""
        rows = compute_ledger(tenants, rooms, [], LedgerFilters(month="2024-06"), today=date(2024, 3, 20))
        assert {row.month for row in rows} == {"2024-06"}
        assert len(rows) == 3
        assert all(row.status == BillingStatus.PENDING for row in rows)

    def test_no_filters(self, tenants: list[Tenant], rooms: list[Room]) -> None:
        rows = compute_ledger(tenants, rooms, [], today=date(2024, 3, 1))
        assert len(rows) == 6


class TestSummarizeMonth:
    """Tests for summarize_month."""

    def test_split_due_and_paid(self) -> None:
        tenants = [
            Tenant(name="Asha", room_number="101", join_date=date(2024, 1, 15), id=1),
            Tenant(name="Bilal", room_number="101", join_date=date(2024, 1, 20), id=2),
            Tenant(name="Chen", room_number="101", join_date=date(2024, 1, 3), is_active=False, id=3),
        ]
        rooms = [Room(room_number="101", monthly_rent=9000, capacity=3)]
        payments = [_payment(1, "2024-03", amount=2500)]

        summary = summarize_month(tenants, rooms, payments, "2024-03", today=date(2024, 3, 20))

        assert [row.tenant.id for row in summary.paid] == [1]
        assert [row.tenant.id for row in summary.due] == [2]
        assert summary.expected == 6000
        assert summary.collected == 2500
        assert summary.outstanding == 3000

    def test_month_before_anyone_is_billed(self) -> None:
        tenants = [Tenant(name="Asha", room_number="101", join_date=date(2024, 1, 15), id=1)]
        rooms = [Room(room_number="101", monthly_rent=9000, capacity=3)]
        summary = summarize_month(tenants, rooms, [], "2024-01", today=date(2024, 3, 20))
        assert summary.due == []
        assert summary.paid == []
        assert summary.expected == 0
