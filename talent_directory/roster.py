from __future__ import annotations

"""
Utilities to read employee rosters from flat delimited files.

A roster file has a header row and one employee per line with the
columns ``id,name,age[,department,position,techStacks]``.  The
``techStacks`` cell is a ``;``-separated list of ``name:level`` pairs,
e.g. ``Python:3;TypeScript:2``.  Column names vary between exports, so
we map the likely variants onto a canonical schema before building
records.

The loader only produces loosely typed field maps (camelCase, the same
shape the HTTP API serves).  Validation happens later in
:mod:`talent_directory.mapping` so that a bad row can be reported and
skipped without failing the whole file.
"""

from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd
from loguru import logger

from .config import EMPLOYEES_CSV_PATH
from .normalize import basic_clean


# ---------------------------
# Column detection / standardisation
# ---------------------------

COLUMN_CANDIDATES: Dict[str, List[str]] = {
    "id": ["id", "ID", "Employee ID", "employee_id", "employeeId"],
    "name": ["name", "Name", "Full Name", "full_name", "fullName"],
    "age": ["age", "Age"],
    "department": ["department", "Department", "dept", "Dept"],
    "position": ["position", "Position", "title", "Title", "role", "Role"],
    "tech_stacks": ["techStacks", "tech_stacks", "Tech Stacks", "techstack", "skills", "Skills"],
}


def _standardise_columns(df: pd.DataFrame) -> pd.DataFrame:
    """
    Rename columns from the raw roster to the canonical internal schema.
    Exact header matches win; otherwise a case-insensitive match is used.
    """
    col_map: Dict[str, str] = {}
    lower_to_original = {str(c).strip().lower(): c for c in df.columns}

    for canon, candidates in COLUMN_CANDIDATES.items():
        for candidate in candidates:
            if candidate in df.columns:
                col_map[candidate] = canon
                break
            cand_lower = candidate.lower()
            if cand_lower in lower_to_original:
                col_map[lower_to_original[cand_lower]] = canon
                break

    logger.debug("Standardising roster columns with map: {}", col_map)
    df_std = df.rename(columns=col_map)

    missing = [c for c in ("id", "name", "age") if c not in df_std.columns]
    if missing:
        logger.warning("Roster is missing required columns: {}", missing)
    return df_std


# ---------------------------
# Field parsing helpers
# ---------------------------

def _parse_number(text: str) -> Optional[float]:
    try:
        return float(text)
    except (TypeError, ValueError):
        return None


def parse_age(value) -> Optional[int | float]:
    """
    Parse an age cell.

    Returns ``None`` when the cell is blank or not numeric: an absent age
    is a distinct state from ``0`` and is rejected later by the schema.
    Fractional values are returned as floats for the schema to reject.
    """
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    number = _parse_number(text)
    if number is None or number != number:
        return None
    return int(number) if number.is_integer() else number


def parse_tech_level(value) -> int:
    """Level of one tech stack entry; missing or non-numeric levels are 0."""
    number = _parse_number(str(value).strip()) if value is not None else None
    if number is None or number != number or number in (float("inf"), float("-inf")):
        return 0
    return int(number)


def parse_tech_stacks(value) -> List[Dict[str, object]]:
    """
    Parse a ``name:level;name:level`` cell into a list of tech stack maps.

    Blank pairs are skipped and stray double quotes around names are
    removed.  Order and duplicates are preserved.
    """
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return []
    stacks: List[Dict[str, object]] = []
    for pair in str(value).split(";"):
        if not pair.strip():
            continue
        parts = pair.split(":")
        name = parts[0].strip().replace('"', "")
        level = parse_tech_level(parts[1]) if len(parts) > 1 else 0
        stacks.append({"name": name, "level": level})
    return stacks


def format_tech_stacks(stacks) -> str:
    """Inverse of :func:`parse_tech_stacks` for writing roster files."""
    return ";".join(f"{s['name']}:{s['level']}" for s in stacks)


# ---------------------------
# Roster -> records
# ---------------------------

def roster_records(df_raw: pd.DataFrame) -> List[Dict[str, object]]:
    """
    Convert a raw roster frame into employee field maps.

    Optional columns default to empty values.  Required columns that are
    missing entirely leave the key out, which the schema reports later.
    """
    df = _standardise_columns(df_raw.copy()).fillna("")
    records: List[Dict[str, object]] = []
    for row in df.to_dict(orient="records"):
        record: Dict[str, object] = {}
        if "id" in row:
            record["id"] = str(row["id"]).strip()
        if "name" in row:
            record["name"] = basic_clean(row["name"])
        if "age" in row:
            record["age"] = parse_age(row["age"])
        record["department"] = basic_clean(row.get("department", ""))
        record["position"] = basic_clean(row.get("position", ""))
        record["techStacks"] = parse_tech_stacks(row.get("tech_stacks", ""))
        records.append(record)
    logger.info("Built {} employee records from roster", len(records))
    return records


# ---------------------------
# IO helpers
# ---------------------------

def _log_bad_line(fields: List[str]) -> None:
    logger.warning("Skipping malformed roster line with {} fields: {}", len(fields), fields)
    return None


def load_roster(path: Optional[Path] = None) -> List[Dict[str, object]]:
    """
    Load a roster file and return its employee field maps in file order.

    Lines with more fields than the header are logged and skipped; an
    empty file yields an empty roster.
    """
    path = Path(path) if path is not None else EMPLOYEES_CSV_PATH
    logger.info("Loading roster from {}", path)
    try:
        df = pd.read_csv(
            path,
            dtype=str,
            keep_default_na=False,
            encoding="utf-8-sig",
            engine="python",
            on_bad_lines=_log_bad_line,
        )
    except pd.errors.EmptyDataError:
        logger.warning("Roster file {} is empty", path)
        return []
    logger.info("Loaded {} rows from roster", len(df))
    return roster_records(df)


def write_roster(records, path: Path) -> Path:
    """Write employee field maps (or Employee models) back out as a roster CSV."""
    rows = []
    for rec in records:
        data = rec.model_dump(by_alias=True) if hasattr(rec, "model_dump") else dict(rec)
        rows.append(
            {
                "id": data.get("id", ""),
                "name": data.get("name", ""),
                "age": data.get("age", ""),
                "department": data.get("department", ""),
                "position": data.get("position", ""),
                "techStacks": format_tech_stacks(data.get("techStacks", [])),
            }
        )
    df = pd.DataFrame(rows, columns=["id", "name", "age", "department", "position", "techStacks"])
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)
    logger.info("Wrote {} employees to {}", len(df), path)
    return path


if __name__ == "__main__":
    # python -m talent_directory.roster
    for rec in load_roster():
        print(rec)
