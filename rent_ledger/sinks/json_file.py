"""JSON file sink: one ``<name>.json`` per batch, one ``<topic>.jsonl`` per event topic."""

import json
import os
from pathlib import Path
from typing import Any

from rent_ledger.exceptions import SinkError
from rent_ledger.sinks.serialization import to_dict


class JsonFileSink:
    """Write reports and events under an output directory."""

    def __init__(self, output_dir: str | Path, pretty: bool = False) -> None:
        """
        Parameters
        ----------
        output_dir : str | Path
            Directory for the output files; created if missing.
        pretty : bool
            Indent batch files. Event lines are always compact.
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.pretty = pretty
        self.written: dict[str, int] = {}

    def write_batch(self, entity_type: str, records: list[Any]) -> None:
        """Replace ``<entity_type>.json`` with the given records.

        The file is written to a temporary name first so a failed write
        never leaves a truncated report behind.
        """
        target = self.output_dir / f"{entity_type}.json"
        partial = target.with_name(target.name + ".partial")
        payload = json.dumps(
            [to_dict(record) for record in records],
            indent=2 if self.pretty else None,
            ensure_ascii=False,
            default=str,
        )
        self._write(partial, payload, mode="w")
        try:
            os.replace(partial, target)
        except OSError as exc:
            raise SinkError(f"Could not write {target}: {exc}") from exc
        self.written[entity_type] = len(records)

    def send(self, topic: str, record: Any, key: str | None = None) -> None:
        """Append one event line; ``rentals.payment`` goes to ``rentals_payment.jsonl``."""
        target = self.output_dir / (topic.replace(".", "_") + ".jsonl")
        self._write(target, json.dumps(to_dict(record), ensure_ascii=False, default=str) + "\n", mode="a")
        self.written[topic] = self.written.get(topic, 0) + 1

    def close(self) -> None:
        print(f"JSON output in {self.output_dir}:")
        for name, count in self.written.items():
            print(f"  {name}: {count} records")

    @staticmethod
    def _write(path: Path, text: str, mode: str) -> None:
        try:
            with open(path, mode, encoding="utf-8") as f:
                f.write(text)
        except OSError as exc:
            raise SinkError(f"Could not write {path}: {exc}") from exc
