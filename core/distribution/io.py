"""
Distribution IO
File: io.py

Purpose: Save and load distribution dumps, and read raw allocation files
(CSV or JSON) for generation.
"""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Any

from core.distribution.distribution import Distribution
from core.schemas.errors import ValidationException


logger = logging.getLogger(__name__)


class DistributionIOError(Exception):
    """Error during distribution file IO."""
    pass


def dump_json(distribution: Distribution, *, indent: int | None = 2) -> str:
    """Serialize a distribution dump to a JSON string with stable key order."""
    return json.dumps(distribution.dump(), indent=indent) + "\n"


def save_distribution(distribution: Distribution, path: str | Path) -> Path:
    """
    Write a distribution dump to disk.

    Returns:
        The path written
    """
    path = Path(path)
    try:
        if path.parent and not path.parent.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dump_json(distribution), encoding="utf-8")
    except OSError as e:
        raise DistributionIOError(f"Failed to write distribution to {path}: {e}") from e
    logger.info(f"Saved distribution ({len(distribution)} values) to {path}")
    return path


def _read_json_file(path: Path) -> Any:
    if not path.exists():
        raise DistributionIOError(f"File not found: {path}")
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise DistributionIOError(f"Invalid JSON in {path}: {e}") from e
    except OSError as e:
        raise DistributionIOError(f"Failed to read {path}: {e}") from e


def load_distribution(path: str | Path, *, verify: bool = False) -> Distribution:
    """
    Load a distribution dump from disk.

    Args:
        path: Dump file
        verify: Also rehash every leaf and level (Distribution.validate)

    Raises:
        DistributionIOError: If the file is missing or not JSON
        FormatVersionException: If the dump format is unknown
        ValidationException: If the dump is inconsistent
    """
    path = Path(path)
    distribution = Distribution.parse(_read_json_file(path))
    logger.info(f"Loaded distribution {distribution.root_hex} from {path}")

    if verify:
        result = distribution.validate()
        if not result.ok:
            raise ValidationException(
                f"Distribution in {path} failed verification: "
                f"{'; '.join(result.get_error_messages())}",
                details={"failed_checks": [c.check_id for c in result.get_failed_checks()]},
            )
    return distribution


def read_allocations_file(path: str | Path) -> list[dict[str, str]]:
    """
    Read raw allocation entries from a CSV or JSON file.

    CSV needs an "address" column and an "amount" (or "allocation") column.
    JSON may be a list of entries or an object with an "allocations" list.
    Values are returned unvalidated; Distribution.build validates them.
    """
    path = Path(path)
    if path.suffix.lower() == ".json":
        data = _read_json_file(path)
        if isinstance(data, dict):
            data = data.get("allocations")
        if not isinstance(data, list):
            raise DistributionIOError(
                f"{path} must contain a list of allocations or an 'allocations' list"
            )
        return data

    if not path.exists():
        raise DistributionIOError(f"File not found: {path}")
    rows: list[dict[str, str]] = []
    try:
        with open(path, "r", encoding="utf-8", newline="") as csvfile:
            reader = csv.DictReader(csvfile)
            fieldnames = reader.fieldnames or []
            if "address" not in fieldnames or not (
                "amount" in fieldnames or "allocation" in fieldnames
            ):
                raise DistributionIOError(
                    f"{path} needs a header with 'address' and 'amount' columns"
                )
            for row in reader:
                amount = row.get("amount") or row.get("allocation") or ""
                rows.append({
                    "address": (row.get("address") or "").strip(),
                    "amount": amount.strip(),
                })
    except OSError as e:
        raise DistributionIOError(f"Failed to read {path}: {e}") from e
    return rows


__all__ = [
    "DistributionIOError",
    "dump_json",
    "save_distribution",
    "load_distribution",
    "read_allocations_file",
]
