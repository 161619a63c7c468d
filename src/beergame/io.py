"""Helpers for loading game inputs and exporting simulation reports."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
import csv
import random
import warnings

from .simulation import (
    ACTOR_COUNT,
    DEFAULT_ORDER_QUANTITY,
    ROLES,
    SimulationReport,
    coerce_quantity,
)


def parse_order_lines(lines: Iterable[str] | str) -> list[list[int]]:
    """Parse "retailer,wholesaler,distributor,manufacturer" lines into rows."""
    if isinstance(lines, str):
        lines = lines.splitlines()

    rows: list[list[int]] = []
    for line in lines:
        if not line.strip():
            continue
        cells = [cell.strip() for cell in line.split(",")]
        if len(cells) > ACTOR_COUNT:
            warnings.warn(
                f"Ignoring {len(cells) - ACTOR_COUNT} extra order cell(s) in line {line.strip()!r}.",
                stacklevel=2,
            )
            cells = cells[:ACTOR_COUNT]
        row = [coerce_quantity(cell, DEFAULT_ORDER_QUANTITY) for cell in cells]
        row.extend([DEFAULT_ORDER_QUANTITY] * (ACTOR_COUNT - len(row)))
        rows.append(row)
    return rows


def iter_order_rows_from_csv(
    path: str,
    *,
    role_fields: Sequence[str] = ROLES,
) -> Iterator[list[int]]:
    if len(role_fields) != ACTOR_COUNT:
        raise ValueError(f"role_fields must name {ACTOR_COUNT} columns.")
    with open(path, newline="") as handle:
        reader = csv.DictReader(handle)
        _validate_required_columns(
            reader.fieldnames,
            required_fields=role_fields,
            context="order CSV",
        )
        for row in reader:
            yield [
                coerce_quantity(row.get(field), DEFAULT_ORDER_QUANTITY)
                for field in role_fields
            ]


def generate_external_demand(
    *,
    weeks: int,
    minimum: int = 0,
    maximum: int = 20,
    seed: int | None = None,
) -> list[int]:
    """Draw one uniform integer customer demand per week in [minimum, maximum]."""
    if weeks <= 0:
        raise ValueError("Weeks must be positive.")
    if minimum < 0:
        raise ValueError("minimum cannot be negative.")
    if maximum < minimum:
        raise ValueError("maximum must be greater than or equal to minimum.")

    rng = random.Random(seed)
    return [rng.randint(minimum, maximum) for _ in range(weeks)]


def weekly_report_rows_to_dicts(
    report: SimulationReport,
) -> list[dict[str, int | float]]:
    """Flatten the weekly report into one dictionary per week."""
    serialized: list[dict[str, int | float]] = []
    for row in report.rows:
        entry: dict[str, int | float] = {"week": row.week}
        for index, actor in enumerate(report.actors):
            entry[f"{actor.role}_inventory"] = row.inventory[index]
            entry[f"{actor.role}_backorder"] = row.backorder[index]
            entry[f"{actor.role}_cost"] = row.cost[index]
            orders = actor.weekly_order
            entry[f"{actor.role}_order"] = (
                orders[row.week - 1] if row.week - 1 < len(orders) else 0
            )
        serialized.append(entry)
    return serialized


def report_totals_to_dict(report: SimulationReport) -> dict[str, float]:
    totals = {actor.role: actor.total_cost for actor in report.actors}
    totals["overall"] = report.overall_total_cost
    return totals


def simulation_report_to_dataframe(
    report: SimulationReport,
    *,
    library: str = "pandas",
):
    """Convert the weekly report into a pandas or polars DataFrame."""
    data = weekly_report_rows_to_dicts(report)
    if library == "pandas":
        try:
            import pandas as pd  # type: ignore
        except ModuleNotFoundError as exc:
            raise ModuleNotFoundError(
                "pandas is required for simulation_report_to_dataframe(library='pandas')."
            ) from exc
        return pd.DataFrame(data)
    if library == "polars":
        try:
            import polars as pl  # type: ignore
        except ModuleNotFoundError as exc:
            raise ModuleNotFoundError(
                "polars is required for simulation_report_to_dataframe(library='polars')."
            ) from exc
        return pl.DataFrame(data)
    raise ValueError("library must be 'pandas' or 'polars'.")


def write_simulation_report_to_csv(path: str, report: SimulationReport) -> None:
    fieldnames = ["week"]
    for actor in report.actors:
        fieldnames.extend(
            [
                f"{actor.role}_inventory",
                f"{actor.role}_backorder",
                f"{actor.role}_cost",
                f"{actor.role}_order",
            ]
        )
    with open(path, "w", newline="") as handle:
        writer = csv.DictWriter(handle, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerows(weekly_report_rows_to_dicts(report))


def _validate_required_columns(
    fieldnames: Sequence[str] | None,
    *,
    required_fields: Iterable[str],
    context: str,
) -> None:
    if not fieldnames:
        warnings.warn(f"Missing header row for {context}.", stacklevel=2)
        raise ValueError(f"{context} is missing a header row.")
    field_set = set(fieldnames)
    missing_required = [field for field in required_fields if field not in field_set]
    if missing_required:
        missing_display = ", ".join(missing_required)
        warnings.warn(
            f"Missing required columns for {context}: {missing_display}.",
            stacklevel=2,
        )
        raise ValueError(f"{context} is missing required columns: {missing_display}.")
