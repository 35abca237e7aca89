"""Tests for output sinks."""

import json
from datetime import date, datetime
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest

from rent_ledger.config import KafkaConfig
from rent_ledger.exceptions import SinkError
from rent_ledger.models import Event
from rent_ledger.models.rental import BillingRow, MonthSummary, PaymentRecord, Room, Tenant
from rent_ledger.services import EventPublisher
from rent_ledger.sinks import ConsoleSink, JsonFileSink, KafkaSink
from rent_ledger.sinks.console import format_billing_row
from rent_ledger.sinks.kafka import ProducerStats


@pytest.fixture
def billing_rows() -> list[BillingRow]:
    tenant = Tenant(name="Asha", room_number="101", join_date=date(2024, 1, 15), id=7)
    return [
        BillingRow(tenant=tenant, month="2024-02", due_amount=3000, due_date=date(2024, 2, 5), payment=None, days_overdue=10),
        BillingRow(tenant=tenant, month="2024-03", due_amount=3000, due_date=date(2024, 3, 5), payment=None),
    ]


@pytest.fixture
def event() -> Event:
    return Event(
        event_id="e1",
        event_type="payment.recorded",
        occurred_at=datetime(2024, 2, 3, 10, 0),
        source="rent-ledger",
        subject="7",
        data={"month": "2024-02", "amount": 3000},
    )


class TestConsoleSink:
    """Tests for ConsoleSink."""

    def test_write_batch(self, capsys: pytest.CaptureFixture, billing_rows: list[BillingRow]) -> None:
        sink = ConsoleSink(pretty=False)
        sink.write_batch("billing_rows", billing_rows)

        lines = capsys.readouterr().out.splitlines()
        assert "== billing_rows (2 records) ==" in lines
        assert lines[2].split() == ["ROOM", "TENANT", "MONTH", "DUE", "STATUS", "PAID", "ON", "LATE"]
        assert lines[3].split() == ["101", "Asha", "2024-02", "3000", "OVERDUE", "-", "10"]
        assert lines[4].split() == ["101", "Asha", "2024-03", "3000", "PENDING", "-"]

    def test_paid_row(self) -> None:
        tenant = Tenant(name="Asha", room_number="101", join_date=date(2024, 1, 15), id=7)
        payment = PaymentRecord(tenant_id=7, room_number="101", month="2024-02", amount=3000, paid_date=date(2024, 2, 3))
        row = BillingRow(tenant=tenant, month="2024-02", due_amount=3000, due_date=date(2024, 2, 5), payment=payment)

        assert format_billing_row(row).split() == ["101", "Asha", "2024-02", "3000", "PAID", "2024-02-03"]

    def test_max_records(self, capsys: pytest.CaptureFixture, billing_rows: list[BillingRow]) -> None:
        sink = ConsoleSink(pretty=True, max_records=1)
        sink.write_batch("billing_rows", billing_rows)
        out = capsys.readouterr().out
        assert "... and 1 more records" in out
        assert "2024-03" not in out

    def test_month_summary(self, capsys: pytest.CaptureFixture, billing_rows: list[BillingRow]) -> None:
        sink = ConsoleSink()
        sink.write_batch("summary_2024-02", [MonthSummary(month="2024-02", due=billing_rows[:1])])

        out = capsys.readouterr().out
        assert "2024-02: expected=3000 collected=0 outstanding=3000" in out
        assert "-- due (1) --" in out
        assert "-- paid (0) --" in out

    def test_other_records_as_json(self, capsys: pytest.CaptureFixture) -> None:
        sink = ConsoleSink(pretty=False)
        sink.write_batch("dashboard", [{"rooms": 2, "occupied_beds": 3}])
        assert '{"rooms": 2, "occupied_beds": 3}' in capsys.readouterr().out

    def test_send_and_close(self, capsys: pytest.CaptureFixture, event: Event) -> None:
        sink = ConsoleSink(pretty=False)
        sink.send("rentals.payment", event, key="7")
        sink.send("rentals.payment", event, key="7")
        sink.close()

        out = capsys.readouterr().out
        assert "[rentals.payment] key=7" in out
        assert "rentals.payment: 2 records" in out


class TestJsonFileSink:
    """Tests for JsonFileSink."""

    def test_write_batch(self, tmp_path: Path, billing_rows: list[BillingRow]) -> None:
        sink = JsonFileSink(tmp_path / "out")
        sink.write_batch("billing_rows", billing_rows)

        data = json.loads((tmp_path / "out" / "billing_rows.json").read_text(encoding="utf-8"))
        assert [record["month"] for record in data] == ["2024-02", "2024-03"]
        assert data[0]["due_date"] == "2024-02-05"
        assert data[1]["status"] == "PENDING"
        assert not (tmp_path / "out" / "billing_rows.json.partial").exists()

    def test_write_batch_replaces_file(self, tmp_path: Path) -> None:
        sink = JsonFileSink(tmp_path, pretty=True)
        sink.write_batch("rooms", [Room(room_number="101", monthly_rent=9000, capacity=3)])
        sink.write_batch("rooms", [])
        assert json.loads((tmp_path / "rooms.json").read_text(encoding="utf-8")) == []

    def test_send_appends_jsonl(self, tmp_path: Path, event: Event) -> None:
        sink = JsonFileSink(tmp_path)
        sink.send("rentals.payment", event)
        sink.send("rentals.payment", event)

        lines = (tmp_path / "rentals_payment.jsonl").read_text(encoding="utf-8").splitlines()
        assert len(lines) == 2
        assert json.loads(lines[0])["event_type"] == "payment.recorded"

    def test_write_error(self, tmp_path: Path) -> None:
        sink = JsonFileSink(tmp_path)
        (tmp_path / "rooms.json").mkdir()
        with pytest.raises(SinkError):
            sink.write_batch("rooms", [])

    def test_close_summary(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        sink = JsonFileSink(tmp_path)
        sink.write_batch("dashboard", [{"rooms": 2}])
        sink.close()
        assert "dashboard: 1 records" in capsys.readouterr().out

    def test_publisher_writes_event_files(self, tmp_path: Path) -> None:
        """Test EventPublisher and JsonFileSink together."""
        publisher = EventPublisher(JsonFileSink(tmp_path), clock=lambda: datetime(2024, 2, 3))
        publisher.publish("tenant.created", 7, {"room_number": "101"})

        record = json.loads((tmp_path / "rentals_tenant.jsonl").read_text(encoding="utf-8"))
        assert record["subject"] == "7"
        assert record["source"] == "rent-ledger"
        assert record["occurred_at"] == "2024-02-03T00:00:00"


class TestProducerStats:
    """Tests for ProducerStats."""

    def test_success_rate(self) -> None:
        assert ProducerStats().success_rate == 0.0
        assert ProducerStats(sent=4, delivered=3, failed=1).success_rate == 0.75


class TestKafkaSink:
    """Tests for KafkaSink with a mocked producer."""

    @pytest.fixture
    def producer(self) -> Any:
        with patch("rent_ledger.sinks.kafka.Producer") as producer_cls:
            producer_cls.return_value.flush.return_value = 0
            yield producer_cls

    def test_init_from_string(self, producer: MagicMock) -> None:
        sink = KafkaSink("broker:9092")
        config = producer.call_args.args[0]
        assert config["bootstrap.servers"] == "broker:9092"
        assert config["acks"] == "all"
        assert sink.config.topic_prefix == "rentals"

    def test_write_batch_keys_by_tenant(self, producer: MagicMock, billing_rows: list[BillingRow]) -> None:
        sink = KafkaSink(KafkaConfig(topic_prefix="pg"))
        sink.write_batch("billing_rows", billing_rows)

        instance = producer.return_value
        assert instance.produce.call_count == 2
        kwargs = instance.produce.call_args.kwargs
        assert kwargs["topic"] == "pg.billing_rows"
        assert kwargs["key"] == b"7"
        assert json.loads(kwargs["value"].decode("utf-8"))["month"] == "2024-03"
        instance.flush.assert_called_with(30.0)
        assert sink.stats.sent == 2

    def test_unknown_entity_has_no_key(self, producer: MagicMock) -> None:
        sink = KafkaSink(KafkaConfig())
        sink.write_batch("dashboard", [{"rooms": 2}])
        assert producer.return_value.produce.call_args.kwargs["key"] is None

    def test_send_with_explicit_key(self, producer: MagicMock, event: Event) -> None:
        sink = KafkaSink(KafkaConfig())
        sink.send("rentals.payment", event, key="7")
        kwargs = producer.return_value.produce.call_args.kwargs
        assert kwargs["key"] == b"7"
        producer.return_value.poll.assert_called_with(0)

    def test_delivery_callback(self, producer: MagicMock) -> None:
        sink = KafkaSink(KafkaConfig())
        msg = MagicMock()
        msg.topic.return_value = "rentals.payment"
        msg.partition.return_value = 0
        msg.offset.return_value = 12

        sink._delivery_callback(None, msg)
        sink._delivery_callback("broker down", msg)

        assert sink.stats.delivered == 1
        assert sink.stats.failed == 1

    def test_message_headers(self, producer: MagicMock, event: Event) -> None:
        KafkaSink(KafkaConfig()).send("rentals.payment", event)
        assert producer.return_value.produce.call_args.kwargs["headers"] == [("entity", b"payment")]

    def test_summary_keyed_by_month(self, producer: MagicMock, billing_rows: list[BillingRow]) -> None:
        sink = KafkaSink(KafkaConfig())
        sink.write_batch("summary_2024-02", [MonthSummary(month="2024-02", due=billing_rows[:1])])

        kwargs = producer.return_value.produce.call_args.kwargs
        assert kwargs["topic"] == "rentals.summary_2024-02"
        assert kwargs["key"] == b"2024-02"
        assert json.loads(kwargs["value"].decode("utf-8"))["outstanding"] == 3000

    def test_queue_full_retries_once(self, producer: MagicMock, event: Event) -> None:
        instance = producer.return_value
        instance.produce.side_effect = [BufferError("queue full"), None]

        sink = KafkaSink(KafkaConfig())
        sink.send("rentals.payment", event, key="7")

        assert instance.produce.call_count == 2
        instance.poll.assert_any_call(KafkaSink.QUEUE_FULL_POLL_SECONDS)
        assert sink.stats.sent == 1

    def test_queue_still_full(self, producer: MagicMock, event: Event) -> None:
        producer.return_value.produce.side_effect = BufferError("queue full")

        sink = KafkaSink(KafkaConfig())
        with pytest.raises(SinkError):
            sink.send("rentals.payment", event, key="7")
        assert sink.stats.sent == 0

    def test_flush_reports_remaining(self, producer: MagicMock) -> None:
        producer.return_value.flush.return_value = 3
        assert KafkaSink(KafkaConfig()).flush(timeout=1.0) == 3

    def test_close_flushes(self, producer: MagicMock) -> None:
        sink = KafkaSink(KafkaConfig())
        sink.close()
        producer.return_value.flush.assert_called_once_with(30.0)
