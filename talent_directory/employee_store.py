from __future__ import annotations

"""
Employee record stores.

Two backends share the :class:`EmployeeDatabase` contract:

- :class:`InMemoryEmployeeDatabase` holds a fixed, preloaded set in an
  insertion-ordered map (optionally read from a roster CSV).  The map's
  order is the "natural order" every listing returns.
- :class:`KeyValueEmployeeDatabase` re-reads a key-value table on every
  query through a get-by-key and a full-scan primitive.  The boto3
  backed :class:`DynamoDBEmployeeTable` provides those primitives.

Both decode records against the Employee schema.  A malformed record
met during a listing is logged and skipped; a malformed record that
was requested by id raises :class:`~talent_directory.mapping.MalformedRecordError`.
"""

from abc import ABC, abstractmethod
from collections import OrderedDict
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Protocol

import boto3
from loguru import logger

from .config import AWS_REGION, Employee
from .mapping import (
    MalformedRecordError,
    SkippedRecord,
    decode_employee,
    decode_employees,
    employee_fields_from_item,
    employee_to_item,
)
from .roster import load_roster
from .search import filter_employees


def _log_skipped(skipped: List[SkippedRecord]) -> None:
    for rec in skipped:
        logger.warning(
            "Employee {} is missing some fields and skipped: {} ({})",
            rec.record_id or "<no id>",
            rec.reason,
            rec.raw,
        )


class EmployeeDatabase(ABC):
    @abstractmethod
    def get_employee(self, employee_id: str) -> Optional[Employee]:
        """Return the employee with ``employee_id`` or ``None`` if absent."""

    @abstractmethod
    def get_employees(self, filter_text: str = "") -> List[Employee]:
        """Return the valid employees matching ``filter_text`` in store order."""


# =============================================================================
# In-memory backend
# =============================================================================

class InMemoryEmployeeDatabase(EmployeeDatabase):
    def __init__(self, records: Iterable[Any] = ()):
        self._employees: "OrderedDict[str, Employee]" = OrderedDict()
        # ids whose source record failed to decode, with the reason
        self._rejected: Dict[str, str] = {}

        valid, skipped = decode_employees(records)
        _log_skipped(skipped)
        for rec in skipped:
            if rec.record_id:
                self._rejected[rec.record_id] = rec.reason
        for employee in valid:
            if employee.id in self._employees:
                logger.warning("Duplicate employee id {}; keeping the later record", employee.id)
            self._employees[employee.id] = employee
            self._rejected.pop(employee.id, None)
        logger.info("Loaded {} employees ({} skipped)", len(self._employees), len(skipped))

    @classmethod
    def from_csv(cls, path: Path) -> "InMemoryEmployeeDatabase":
        return cls(load_roster(path))

    def __len__(self) -> int:
        return len(self._employees)

    def get_employee(self, employee_id: str) -> Optional[Employee]:
        if employee_id in self._rejected:
            raise MalformedRecordError(employee_id, self._rejected[employee_id])
        return self._employees.get(employee_id)

    def get_employees(self, filter_text: str = "") -> List[Employee]:
        return filter_employees(self._employees.values(), filter_text)


# =============================================================================
# Key-value backend
# =============================================================================

class EmployeeTable(Protocol):
    def get_item(self, employee_id: str) -> Optional[Mapping[str, Any]]: ...

    def scan(self) -> Iterable[Mapping[str, Any]]: ...


class DynamoDBEmployeeTable:
    """DynamoDB table keyed by the string attribute ``id``."""

    def __init__(self, table_name: str, client=None, region_name: str = AWS_REGION):
        self.table_name = table_name
        self._client = client if client is not None else boto3.client("dynamodb", region_name=region_name)

    def get_item(self, employee_id: str) -> Optional[Mapping[str, Any]]:
        output = self._client.get_item(TableName=self.table_name, Key={"id": {"S": employee_id}})
        return output.get("Item")

    def scan(self) -> Iterator[Mapping[str, Any]]:
        kwargs: Dict[str, Any] = {"TableName": self.table_name}
        while True:
            output = self._client.scan(**kwargs)
            yield from output.get("Items") or []
            last_key = output.get("LastEvaluatedKey")
            if not last_key:
                break
            kwargs["ExclusiveStartKey"] = last_key

    def put_employee(self, employee: Employee) -> None:
        self._client.put_item(TableName=self.table_name, Item=employee_to_item(employee))


class KeyValueEmployeeDatabase(EmployeeDatabase):
    def __init__(self, table: EmployeeTable):
        self._table = table

    def get_employee(self, employee_id: str) -> Optional[Employee]:
        item = self._table.get_item(employee_id)
        if item is None:
            return None
        fields = employee_fields_from_item(item)
        fields["id"] = employee_id
        result = decode_employee(fields)
        if not result.ok:
            raise MalformedRecordError(employee_id, f"{result.error} ({fields})")
        return result.value

    def get_employees(self, filter_text: str = "") -> List[Employee]:
        fields = [employee_fields_from_item(item) for item in self._table.scan()]
        valid, skipped = decode_employees(fields)
        _log_skipped(skipped)
        return filter_employees(valid, filter_text)
