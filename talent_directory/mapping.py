from __future__ import annotations

"""
Mapping utilities between raw store records and the strict Pydantic
schemas defined in :mod:`talent_directory.config`.

Everything that comes from outside the process (roster rows, key-value
store items, request bodies) goes through a decode step here.  Decoding
never raises: it returns a :class:`DecodeResult` that is either a value
or an error message, and each call site decides what a failure means.
Bulk decoding returns the valid records together with the skipped ones
so the caller can decide whether to log.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Iterable, List, Mapping, Optional, Tuple, TypeVar

from pydantic import BaseModel, ValidationError

from .config import Employee, Recommendation
from .roster import parse_tech_stacks

T = TypeVar("T")


class MalformedRecordError(RuntimeError):
    """A record that was explicitly requested exists but fails its schema."""

    def __init__(self, record_id: str, reason: str):
        super().__init__(f"Record {record_id} is malformed: {reason}")
        self.record_id = record_id
        self.reason = reason


@dataclass(frozen=True)
class DecodeResult(Generic[T]):
    value: Optional[T] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class SkippedRecord:
    record_id: str
    reason: str
    raw: Dict[str, Any] = field(default_factory=dict)


def validation_messages(exc: ValidationError) -> List[str]:
    """Flatten a pydantic error into ``"field.path: message"`` strings."""
    messages: List[str] = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ())) or "<record>"
        messages.append(f"{loc}: {err.get('msg', 'invalid')}")
    return messages


def _decode(model: type[BaseModel], raw: Any) -> DecodeResult:
    if isinstance(raw, model):
        return DecodeResult(value=raw)
    if not isinstance(raw, Mapping):
        return DecodeResult(error=f"expected a mapping, got {type(raw).__name__}")
    try:
        return DecodeResult(value=model.model_validate(dict(raw)))
    except ValidationError as exc:
        return DecodeResult(error="; ".join(validation_messages(exc)))


def decode_employee(raw: Any) -> DecodeResult[Employee]:
    return _decode(Employee, raw)


def decode_recommendation(raw: Any) -> DecodeResult[Recommendation]:
    return _decode(Recommendation, raw)


def _record_id(raw: Any) -> str:
    if isinstance(raw, BaseModel):
        return str(getattr(raw, "id", ""))
    if isinstance(raw, Mapping):
        return str(raw.get("id", ""))
    return ""


def decode_employees(items: Iterable[Any]) -> Tuple[List[Employee], List[SkippedRecord]]:
    """
    Decode every item independently.

    Returns ``(valid, skipped)``; one bad item never affects the others
    and the valid records keep their input order.
    """
    valid: List[Employee] = []
    skipped: List[SkippedRecord] = []
    for raw in items:
        result = decode_employee(raw)
        if result.ok:
            valid.append(result.value)
        else:
            skipped.append(
                SkippedRecord(
                    record_id=_record_id(raw),
                    reason=result.error or "",
                    raw=dict(raw) if isinstance(raw, Mapping) else {},
                )
            )
    return valid, skipped


# ---------------------------
# Key-value store attribute maps
# ---------------------------

def _attr_string(attr: Any) -> Optional[str]:
    if isinstance(attr, Mapping) and "S" in attr:
        return str(attr["S"])
    return None


def _attr_number(attr: Any) -> Optional[int | float]:
    """Numbers travel as strings; absence decodes to ``None``, never ``0``."""
    if not isinstance(attr, Mapping) or attr.get("N") is None:
        return None
    text = str(attr["N"]).strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    return int(number) if number.is_integer() else number


def _attr_tech_stacks(attr: Any) -> Any:
    if not isinstance(attr, Mapping):
        return []
    if "S" in attr:
        return parse_tech_stacks(attr["S"])
    stacks = []
    for entry in attr.get("L", []):
        fields = entry.get("M", {}) if isinstance(entry, Mapping) else {}
        stacks.append(
            {
                "name": _attr_string(fields.get("name")),
                "level": _attr_number(fields.get("level")),
            }
        )
    return stacks


def employee_fields_from_item(item: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Turn a key-value store item (``{"name": {"S": ...}, "age": {"N": ...}}``)
    into an employee field map ready for :func:`decode_employee`.
    """
    return {
        "id": _attr_string(item.get("id")) or "",
        "name": _attr_string(item.get("name")) or "",
        "age": _attr_number(item.get("age")),
        "department": _attr_string(item.get("department")) or "",
        "position": _attr_string(item.get("position")) or "",
        "techStacks": _attr_tech_stacks(item.get("techStacks")),
    }


def employee_to_item(employee: Employee) -> Dict[str, Any]:
    """Encode an employee as a key-value store item."""
    return {
        "id": {"S": employee.id},
        "name": {"S": employee.name},
        "age": {"N": str(employee.age)},
        "department": {"S": employee.department},
        "position": {"S": employee.position},
        "techStacks": {
            "L": [
                {"M": {"name": {"S": t.name}, "level": {"N": str(t.level)}}}
                for t in employee.tech_stacks
            ]
        },
    }
