# talent_directory/cli.py
"""
Command line entry point for the talent directory.

Sub-commands:
- list     keyword search over the directory
- similar  "similar employees" for one employee, optionally written to CSV
- stats    recommendation dashboard numbers
- import   push a roster CSV into the DynamoDB employee table
- serve    run the FastAPI app with uvicorn
"""

from __future__ import annotations
import argparse
import sys
from pathlib import Path
from typing import List

import pandas as pd
from loguru import logger

from talent_directory.config import (
    API_HOST,
    API_PORT,
    CATEGORY_LABELS,
    EMPLOYEE_TABLE_NAME,
    EMPLOYEES_CSV_PATH,
    IMPACT_LABELS,
    LOG_LEVEL,
    SIMILAR_TOP_N,
    configure_logging,
)
from talent_directory.employee_store import DynamoDBEmployeeTable, InMemoryEmployeeDatabase
from talent_directory.service import TalentDirectory, build_directory
from talent_directory.similarity import ScoredEmployee


def _format_employee(e) -> str:
    techs = ", ".join(f"{t.name}:{t.level}" for t in e.tech_stacks)
    return f"{e.id}\t{e.name}\t{e.age}\t{e.department}\t{e.position}\t{techs}"


def write_similar_csv(employee_id: str, ranked: List[ScoredEmployee], out_path: Path) -> None:
    """
    Write one row per similar employee with the columns:
      - Employee_id
      - Similar_employee_id
      - Score
    """
    rows = [(employee_id, s.employee.id, round(s.score, 4)) for s in ranked]
    df = pd.DataFrame(rows, columns=["Employee_id", "Similar_employee_id", "Score"])
    out_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(out_path, index=False)


def cmd_list(directory: TalentDirectory, args) -> int:
    employees = directory.list_employees(args.filter)
    for e in employees:
        print(_format_employee(e))
    print(f"{len(employees)} employee(s)")
    return 0


def cmd_similar(directory: TalentDirectory, args) -> int:
    ranked = directory.similar_employees(args.employee_id, top_n=args.topk)
    if ranked is None:
        print(f"Employee {args.employee_id} not found", file=sys.stderr)
        return 1
    for s in ranked:
        print(f"{s.score:.2f}\t{_format_employee(s.employee)}")
    if args.out:
        write_similar_csv(args.employee_id, ranked, Path(args.out))
        print(f"Wrote {len(ranked)} rows to {args.out}")
    return 0


def cmd_stats(directory: TalentDirectory, args) -> int:
    stats = directory.dashboard_stats()
    print(f"Recommendations: {stats.total_recommendations}")
    print(f"Employees:       {stats.total_employees}")
    print("Top categories:")
    for c in stats.top_categories:
        print(f"  {CATEGORY_LABELS.get(c.category, c.category)}: {c.count}")
    print("Top impacts:")
    for i in stats.top_impacts:
        print(f"  {IMPACT_LABELS.get(i.impact, i.impact)}: {i.count}")
    print("Most recommended:")
    for ec in stats.top_employees:
        print(f"  {ec.employee.name}: {ec.count}")
    return 0


def cmd_import(args) -> int:
    source = InMemoryEmployeeDatabase.from_csv(Path(args.csv))
    table = DynamoDBEmployeeTable(args.table)
    employees = source.get_employees("")
    for i, employee in enumerate(employees, 1):
        table.put_employee(employee)
        if i % 50 == 0 or i == len(employees):
            logger.info("Imported {}/{} employees", i, len(employees))
    print(f"Imported {len(employees)} employees into {args.table}")
    return 0


def cmd_serve(args) -> int:
    import uvicorn

    uvicorn.run("talent_directory.api:app", host=args.host, port=args.port, log_level=LOG_LEVEL.lower())
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="talent-directory")
    sub = ap.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="search employees by keyword")
    p_list.add_argument("filter", nargs="?", default="", help="keyword (name, age or tech stack)")

    p_sim = sub.add_parser("similar", help="rank employees similar to one employee")
    p_sim.add_argument("employee_id")
    p_sim.add_argument("--topk", type=int, default=SIMILAR_TOP_N, help=f"max results (default {SIMILAR_TOP_N})")
    p_sim.add_argument("--out", dest="out", type=str, default=None, help="optional CSV output file")

    sub.add_parser("stats", help="recommendation dashboard numbers")

    p_imp = sub.add_parser("import", help="load a roster CSV into the DynamoDB table")
    p_imp.add_argument("--csv", type=str, default=str(EMPLOYEES_CSV_PATH))
    p_imp.add_argument("--table", type=str, default=EMPLOYEE_TABLE_NAME)

    p_srv = sub.add_parser("serve", help="run the HTTP API")
    p_srv.add_argument("--host", type=str, default=API_HOST)
    p_srv.add_argument("--port", type=int, default=API_PORT)
    return ap


def main(argv: List[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(log_to_file=args.command == "serve")

    if args.command == "serve":
        return cmd_serve(args)
    if args.command == "import":
        return cmd_import(args)

    directory = build_directory()
    handlers = {"list": cmd_list, "similar": cmd_similar, "stats": cmd_stats}
    return handlers[args.command](directory, args)


if __name__ == "__main__":
    sys.exit(main())
