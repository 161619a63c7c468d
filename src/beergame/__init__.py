"""Beer distribution game simulation library."""

from importlib.metadata import PackageNotFoundError, version as _dist_version

try:
    __version__ = _dist_version("beergame")
except PackageNotFoundError:
    __version__ = "0.0.0"

from .io import (
    generate_external_demand,
    iter_order_rows_from_csv,
    parse_order_lines,
    report_totals_to_dict,
    simulation_report_to_dataframe,
    weekly_report_rows_to_dicts,
    write_simulation_report_to_csv,
)
from .simulation import (
    BEER_GAME_TOPOLOGY,
    ROLES,
    ActorHistory,
    ActorState,
    GameConfig,
    Pipeline,
    SimulationReport,
    SupplyChainTopology,
    WeeklyReportRow,
    initial_actors,
    simulate_beer_game,
    simulate_beer_games,
    step_week,
)

__all__ = [
    "__version__",
    "ROLES",
    "BEER_GAME_TOPOLOGY",
    "ActorHistory",
    "ActorState",
    "GameConfig",
    "Pipeline",
    "SimulationReport",
    "SupplyChainTopology",
    "WeeklyReportRow",
    "initial_actors",
    "step_week",
    "simulate_beer_game",
    "simulate_beer_games",
    "generate_external_demand",
    "iter_order_rows_from_csv",
    "parse_order_lines",
    "report_totals_to_dict",
    "simulation_report_to_dataframe",
    "weekly_report_rows_to_dicts",
    "write_simulation_report_to_csv",
]
