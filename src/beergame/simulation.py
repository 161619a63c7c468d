"""Core simulation primitives for the beer distribution game."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
import math


ROLES: tuple[str, ...] = ("retailer", "wholesaler", "distributor", "manufacturer")
ACTOR_COUNT = len(ROLES)
LEAD_TIME = 2
INITIAL_INVENTORY = 12
INITIAL_PIPELINE_QUANTITY = 4
DEFAULT_ORDER_QUANTITY = 4
DEFAULT_DEMAND = 4
HOLDING_COST_PER_UNIT = 0.5
BACKORDER_COST_PER_UNIT = 1.0
DEFAULT_WEEKS = 20

OrderRow = Sequence[object]


class Pipeline:
    """FIFO delay line: push at the tail, pop from the head."""

    def __init__(self, values: Iterable[int] = ()) -> None:
        self._values: deque[int] = deque(values)

    def push(self, value: int) -> None:
        self._values.append(value)

    def pop(self, default: int = 0) -> int:
        if not self._values:
            return default
        return self._values.popleft()

    def copy(self) -> Pipeline:
        return Pipeline(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[int]:
        return iter(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Pipeline):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        return f"Pipeline({list(self._values)!r})"


@dataclass
class ActorState:
    inventory: int
    backorder: int
    incoming_shipments: Pipeline
    incoming_orders: Pipeline
    weekly_cost: list[float] = field(default_factory=list)
    weekly_inventory: list[int] = field(default_factory=list)
    weekly_backorder: list[int] = field(default_factory=list)
    weekly_order: list[int] = field(default_factory=list)

    @classmethod
    def initial(cls) -> ActorState:
        """State of a stage before week 1, with two weeks already in flight."""
        return cls(
            inventory=INITIAL_INVENTORY,
            backorder=0,
            incoming_shipments=Pipeline([INITIAL_PIPELINE_QUANTITY] * LEAD_TIME),
            incoming_orders=Pipeline([INITIAL_PIPELINE_QUANTITY] * LEAD_TIME),
        )

    def copy(self) -> ActorState:
        return ActorState(
            inventory=self.inventory,
            backorder=self.backorder,
            incoming_shipments=self.incoming_shipments.copy(),
            incoming_orders=self.incoming_orders.copy(),
            weekly_cost=list(self.weekly_cost),
            weekly_inventory=list(self.weekly_inventory),
            weekly_backorder=list(self.weekly_backorder),
            weekly_order=list(self.weekly_order),
        )

    def receive_shipment(self) -> int:
        arrived = self.incoming_shipments.pop()
        self.inventory += arrived
        return arrived

    def fulfil(self, demand: int) -> int:
        """Ship as much of demand plus backorder as inventory allows."""
        total_demand = demand + self.backorder
        shipment = min(total_demand, self.inventory)
        self.inventory -= shipment
        self.backorder = max(0, total_demand - shipment)
        return shipment

    def accrue_cost(self) -> float:
        inventory_cost = self.inventory * HOLDING_COST_PER_UNIT
        backorder_cost = self.backorder * BACKORDER_COST_PER_UNIT
        week_cost = inventory_cost + backorder_cost
        self.weekly_cost.append(week_cost)
        self.weekly_inventory.append(self.inventory)
        self.weekly_backorder.append(self.backorder)
        return week_cost


@dataclass(frozen=True)
class SupplyChainTopology:
    """Linear chain of stages; stage 0 faces the customer."""

    roles: tuple[str, ...] = ROLES

    def __len__(self) -> int:
        return len(self.roles)

    def is_retailer(self, stage: int) -> bool:
        return stage == 0

    def is_manufacturer(self, stage: int) -> bool:
        return stage == len(self.roles) - 1

    def downstream(self, stage: int) -> int | None:
        """Stage that receives this stage's shipments."""
        return None if self.is_retailer(stage) else stage - 1

    def upstream(self, stage: int) -> int | None:
        """Stage that receives this stage's orders."""
        return None if self.is_manufacturer(stage) else stage + 1


BEER_GAME_TOPOLOGY = SupplyChainTopology()


@dataclass(frozen=True)
class ActorHistory:
    role: str
    total_cost: float
    weekly_cost: tuple[float, ...]
    weekly_inventory: tuple[int, ...]
    weekly_backorder: tuple[int, ...]
    weekly_order: tuple[int, ...]


@dataclass(frozen=True)
class WeeklyReportRow:
    week: int
    inventory: tuple[int, ...]
    backorder: tuple[int, ...]
    cost: tuple[float, ...]


@dataclass(frozen=True)
class SimulationReport:
    weeks: int
    actors: tuple[ActorHistory, ...]
    rows: tuple[WeeklyReportRow, ...]

    @property
    def total_costs(self) -> tuple[float, ...]:
        return tuple(actor.total_cost for actor in self.actors)

    @property
    def overall_total_cost(self) -> float:
        return sum(self.total_costs)

    def actor(self, role: str) -> ActorHistory:
        for actor in self.actors:
            if actor.role == role:
                return actor
        raise KeyError(role)


@dataclass(frozen=True)
class GameConfig:
    weeks: int = DEFAULT_WEEKS
    demand: Sequence[object] = ()
    orders: Sequence[OrderRow] = ()


def coerce_quantity(value: object, default: int) -> int:
    """Return value as a non-negative int, or default when it is unusable."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value if value >= 0 else default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number) or number < 0:
        return default
    return int(number)


def resolve_demand(demand: Sequence[object], week: int) -> int:
    """Demand for a week; missing or unusable values become the default.

    Zero is a real demand and is kept rather than replaced by the default.
    """
    if week < len(demand):
        return coerce_quantity(demand[week], DEFAULT_DEMAND)
    return DEFAULT_DEMAND


def resolve_order_row(orders: Sequence[OrderRow], week: int) -> list[int]:
    """Effective order row for a week, padded with the default quantity."""
    row = orders[week] if week < len(orders) else ()
    if row is None:
        row = ()
    return [
        coerce_quantity(row[stage], DEFAULT_ORDER_QUANTITY)
        if stage < len(row)
        else DEFAULT_ORDER_QUANTITY
        for stage in range(ACTOR_COUNT)
    ]


def initial_actors() -> list[ActorState]:
    return [ActorState.initial() for _ in ROLES]


def step_week(
    actors: Sequence[ActorState],
    *,
    demand: object,
    orders: OrderRow,
    topology: SupplyChainTopology = BEER_GAME_TOPOLOGY,
) -> list[ActorState]:
    """Advance every stage by one week.

    The given states are left untouched; a new list of states is returned.
    Phases run in order: shipment arrival, demand resolution and dispatch,
    order placement, cost accrual.
    """
    if len(actors) != len(topology):
        raise ValueError(f"Expected {len(topology)} actors, got {len(actors)}.")

    players = [actor.copy() for actor in actors]
    customer_demand = coerce_quantity(demand, DEFAULT_DEMAND)
    order_row = resolve_order_row([orders], 0)

    for player in players:
        player.receive_shipment()

    for stage, player in enumerate(players):
        if topology.is_retailer(stage):
            stage_demand = customer_demand
        else:
            stage_demand = player.incoming_orders.pop()
        shipment = player.fulfil(stage_demand)
        downstream = topology.downstream(stage)
        if downstream is not None:
            players[downstream].incoming_shipments.push(shipment)

    for stage, player in enumerate(players):
        order = order_row[stage]
        player.weekly_order.append(order)
        upstream = topology.upstream(stage)
        if upstream is None:
            # Unlimited production, delivered after the same lead time.
            player.incoming_shipments.push(order)
        else:
            players[upstream].incoming_orders.push(order)

    for player in players:
        player.accrue_cost()

    return players


def build_simulation_report(
    actors: Sequence[ActorState],
    *,
    weeks: int,
    roles: Sequence[str] = ROLES,
) -> SimulationReport:
    histories = tuple(
        ActorHistory(
            role=role,
            total_cost=sum(actor.weekly_cost),
            weekly_cost=tuple(actor.weekly_cost),
            weekly_inventory=tuple(actor.weekly_inventory),
            weekly_backorder=tuple(actor.weekly_backorder),
            weekly_order=tuple(actor.weekly_order),
        )
        for role, actor in zip(roles, actors)
    )

    def value_at(series: Sequence, week: int):
        return series[week] if week < len(series) else 0

    rows = tuple(
        WeeklyReportRow(
            week=week + 1,
            inventory=tuple(value_at(h.weekly_inventory, week) for h in histories),
            backorder=tuple(value_at(h.weekly_backorder, week) for h in histories),
            cost=tuple(value_at(h.weekly_cost, week) for h in histories),
        )
        for week in range(weeks)
    )
    return SimulationReport(weeks=weeks, actors=histories, rows=rows)


def simulate_beer_game(
    *,
    weeks: int = DEFAULT_WEEKS,
    demand: Iterable[object] | None = (),
    orders: Iterable[OrderRow] | None = None,
) -> SimulationReport:
    if isinstance(weeks, bool) or not isinstance(weeks, int) or weeks <= 0:
        raise ValueError("Weeks must be positive.")

    demand_list = list(demand) if demand is not None else []
    order_table = list(orders) if orders is not None else []

    actors = initial_actors()
    for week in range(weeks):
        actors = step_week(
            actors,
            demand=resolve_demand(demand_list, week),
            orders=resolve_order_row(order_table, week),
        )

    return build_simulation_report(actors, weeks=weeks)


def simulate_beer_games(
    games: Mapping[str, GameConfig],
) -> dict[str, SimulationReport]:
    reports: dict[str, SimulationReport] = {}
    for name, config in games.items():
        reports[name] = simulate_beer_game(
            weeks=config.weeks,
            demand=config.demand,
            orders=config.orders,
        )
    return reports
