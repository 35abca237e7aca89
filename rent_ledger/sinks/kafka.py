"""Kafka sink for domain events and ledger reports.

Messages are JSON. Batches go to ``<topic_prefix>.<entity_type>`` and are
keyed so that every message about one tenant (or room, or month) lands on
the same partition.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any

from confluent_kafka import Producer

from rent_ledger.config import KafkaConfig
from rent_ledger.exceptions import SinkError
from rent_ledger.sinks.serialization import to_dict

logger = logging.getLogger(__name__)


@dataclass
class ProducerStats:
    """Counters fed by the producer's delivery reports."""

    sent: int = 0
    delivered: int = 0
    failed: int = 0

    @property
    def success_rate(self) -> float:
        reported = self.delivered + self.failed
        return self.delivered / reported if reported else 0.0


class KafkaSink:
    """Publish records to Kafka."""

    # Serialized field used as the message key, per topic suffix
    KEY_FIELDS = {
        "billing_rows": "tenant_id",
        "payment": "tenant_id",
        "payments": "tenant_id",
        "tenant": "id",
        "tenants": "id",
        "room": "room_number",
        "rooms": "room_number",
    }
    # Batches named ``summary_<month>`` are keyed by month
    SUMMARY_PREFIX = "summary_"

    # Local queue full: poll this long for delivery reports, then retry once
    QUEUE_FULL_POLL_SECONDS = 1.0

    def __init__(self, config: KafkaConfig | str) -> None:
        """
        Parameters
        ----------
        config : KafkaConfig | str
            Producer settings, or just the bootstrap servers.
        """
        if isinstance(config, str):
            config = KafkaConfig(bootstrap_servers=config)

        self.config = config
        self.producer = Producer(config.to_dict())
        self.stats = ProducerStats()

    def _delivery_callback(self, err: Any, msg: Any) -> None:
        if err:
            self.stats.failed += 1
            logger.error("Delivery to %s failed: %s", msg.topic(), err)
        else:
            self.stats.delivered += 1
            logger.debug("Delivered to %s[%d]@%d", msg.topic(), msg.partition(), msg.offset())

    def message_key(self, topic: str, data: dict) -> str | None:
        """Pick the partition key for a serialized record, or None."""
        entity = topic.rsplit(".", 1)[-1]
        if entity.startswith(self.SUMMARY_PREFIX):
            return data.get("month")
        field_name = self.KEY_FIELDS.get(entity)
        if field_name is None or data.get(field_name) is None:
            return None
        return str(data[field_name])

    def send(self, topic: str, record: Any, key: str | None = None) -> None:
        """Queue one record for ``topic``."""
        data = to_dict(record)
        if key is None:
            key = self.message_key(topic, data)

        message = {
            "topic": topic,
            "key": key.encode("utf-8") if key else None,
            "value": json.dumps(data, ensure_ascii=False, default=str).encode("utf-8"),
            "headers": [("entity", topic.rsplit(".", 1)[-1].encode("utf-8"))],
            "callback": self._delivery_callback,
        }
        try:
            self.producer.produce(**message)
        except BufferError:
            logger.warning("Producer queue full, waiting for deliveries before retrying %s", topic)
            self.producer.poll(self.QUEUE_FULL_POLL_SECONDS)
            try:
                self.producer.produce(**message)
            except BufferError as exc:
                raise SinkError(f"Producer queue still full for {topic}") from exc
        self.stats.sent += 1
        self.producer.poll(0)

    def write_batch(self, entity_type: str, records: list[Any]) -> None:
        """Publish ``records`` to ``<topic_prefix>.<entity_type>`` and wait for delivery."""
        topic = f"{self.config.topic_prefix}.{entity_type}"
        for record in records:
            self.send(topic, record)
        self.flush()
        logger.info("Published %d records to %s (failed so far: %d)", len(records), topic, self.stats.failed)

    def flush(self, timeout: float = 30.0) -> int:
        """Wait for outstanding deliveries; return how many are still queued."""
        remaining = self.producer.flush(timeout)
        if remaining:
            logger.warning("%d messages still undelivered after %.0fs", remaining, timeout)
        return remaining

    def close(self) -> None:
        self.flush()
        logger.info(
            "Kafka sink closed: sent=%d delivered=%d failed=%d",
            self.stats.sent,
            self.stats.delivered,
            self.stats.failed,
        )
