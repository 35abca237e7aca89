"""Configuration management for rent-ledger."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from rent_ledger.exceptions import ConfigurationError
from rent_ledger.ledger.policy import DUE_DAY_OF_MONTH, FIRST_DUE_POLICY, FirstDuePolicy

STORE_BACKENDS = ("memory", "postgres")


@dataclass
class KafkaConfig:
    """Kafka producer configuration for domain events."""

    bootstrap_servers: str = "localhost:9092"
    acks: str = "all"
    linger_ms: int = 5
    compression: str = "snappy"
    retries: int = 3
    topic_prefix: str = "rentals"
    enabled: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to confluent-kafka config dict."""
        return {
            "bootstrap.servers": self.bootstrap_servers,
            "acks": self.acks,
            "linger.ms": self.linger_ms,
            "compression.type": self.compression,
            "retries": self.retries,
        }


@dataclass
class PostgresConfig:
    """PostgreSQL connection configuration."""

    host: str = "localhost"
    port: int = 5432
    database: str = "rentals"
    user: str = "postgres"
    password: str = "postgres"

    @property
    def connection_string(self) -> str:
        """Get connection string."""
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"


@dataclass
class OutputConfig:
    """Output configuration."""

    json_output_dir: Path = field(default_factory=lambda: Path("output"))
    pretty_json: bool = False


@dataclass
class LedgerConfig:
    """Billing rules applied by the rent ledger."""

    due_day: int = DUE_DAY_OF_MONTH
    first_due_policy: str = FIRST_DUE_POLICY.value
    default_room_capacity: int = 2

    @property
    def policy(self) -> FirstDuePolicy:
        """First-due policy as an enum member."""
        return FirstDuePolicy(self.first_due_policy)


@dataclass
class RentLedgerConfig:
    """Main configuration for rent-ledger."""

    store_backend: str = "memory"
    postgres: PostgresConfig = field(default_factory=PostgresConfig)
    kafka: KafkaConfig = field(default_factory=KafkaConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    ledger: LedgerConfig = field(default_factory=LedgerConfig)
    seed: int | None = None
    log_level: str = "INFO"
    log_format: str = "standard"

    def validate(self) -> "RentLedgerConfig":
        """Check cross-field constraints, raising ConfigurationError."""
        if self.store_backend not in STORE_BACKENDS:
            raise ConfigurationError(
                f"Unknown store backend {self.store_backend!r}; expected one of {STORE_BACKENDS}"
            )
        if not 1 <= self.ledger.due_day <= 31:
            raise ConfigurationError(f"Due day must be between 1 and 31, got {self.ledger.due_day}")
        try:
            self.ledger.policy
        except ValueError as exc:
            raise ConfigurationError(
                f"Unknown first-due policy {self.ledger.first_due_policy!r}"
            ) from exc
        if self.ledger.default_room_capacity < 1:
            raise ConfigurationError("Default room capacity must be positive")
        return self

    @classmethod
    def from_env(cls) -> "RentLedgerConfig":
        """Create config from environment variables."""
        import os

        try:
            postgres = PostgresConfig(
                host=os.getenv("POSTGRES_HOST", "localhost"),
                port=int(os.getenv("POSTGRES_PORT", "5432")),
                database=os.getenv("POSTGRES_DB", "rentals"),
                user=os.getenv("POSTGRES_USER", "postgres"),
                password=os.getenv("POSTGRES_PASSWORD", "postgres"),
            )

            kafka = KafkaConfig(
                bootstrap_servers=os.getenv("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092"),
                acks=os.getenv("KAFKA_ACKS", "all"),
                topic_prefix=os.getenv("KAFKA_TOPIC_PREFIX", "rentals"),
                enabled=os.getenv("KAFKA_ENABLED", "false").lower() == "true",
            )

            output = OutputConfig(
                json_output_dir=Path(os.getenv("OUTPUT_DIR", "output")),
                pretty_json=os.getenv("PRETTY_JSON", "false").lower() == "true",
            )

            ledger = LedgerConfig(
                due_day=int(os.getenv("LEDGER_DUE_DAY", str(DUE_DAY_OF_MONTH))),
                first_due_policy=os.getenv("LEDGER_FIRST_DUE_POLICY", FIRST_DUE_POLICY.value),
                default_room_capacity=int(os.getenv("DEFAULT_ROOM_CAPACITY", "2")),
            )

            config = cls(
                store_backend=os.getenv("STORE_BACKEND", "memory"),
                postgres=postgres,
                kafka=kafka,
                output=output,
                ledger=ledger,
                seed=int(os.getenv("SEED")) if os.getenv("SEED") else None,
                log_level=os.getenv("LOG_LEVEL", "INFO"),
                log_format=os.getenv("LOG_FORMAT", "standard"),
            )
        except ValueError as exc:
            raise ConfigurationError(f"Invalid numeric setting: {exc}") from exc

        return config.validate()
