import pytest

from beergame import (
    BEER_GAME_TOPOLOGY,
    ActorState,
    GameConfig,
    Pipeline,
    generate_external_demand,
    initial_actors,
    simulate_beer_game,
    simulate_beer_games,
    step_week,
)
from beergame.simulation import (
    build_simulation_report,
    coerce_quantity,
    resolve_demand,
    resolve_order_row,
)


def test_pipeline_is_fifo_and_defaults_to_zero_when_empty():
    pipeline = Pipeline([4, 4])
    pipeline.push(9)

    assert [pipeline.pop(), pipeline.pop(), pipeline.pop()] == [4, 4, 9]
    assert pipeline.pop() == 0
    assert len(pipeline) == 0


def test_initial_actor_state_has_two_weeks_in_flight():
    actor = ActorState.initial()

    assert actor.inventory == 12
    assert actor.backorder == 0
    assert list(actor.incoming_shipments) == [4, 4]
    assert list(actor.incoming_orders) == [4, 4]
    assert actor.weekly_cost == []


def test_topology_links_adjacent_stages():
    assert BEER_GAME_TOPOLOGY.downstream(0) is None
    assert BEER_GAME_TOPOLOGY.downstream(3) == 2
    assert BEER_GAME_TOPOLOGY.upstream(0) == 1
    assert BEER_GAME_TOPOLOGY.upstream(3) is None
    assert BEER_GAME_TOPOLOGY.is_manufacturer(3)


def test_single_week_in_steady_state():
    report = simulate_beer_game(weeks=1, demand=[4], orders=[[4, 4, 4, 4]])

    assert report.total_costs == (6.0, 6.0, 6.0, 6.0)
    assert report.overall_total_cost == 24.0
    for actor in report.actors:
        assert actor.weekly_inventory == (12,)
        assert actor.weekly_backorder == (0,)
        assert actor.weekly_order == (4,)


def test_steady_state_holds_for_full_game():
    report = simulate_beer_game(weeks=20, demand=[4] * 20)

    assert report.total_costs == (120.0, 120.0, 120.0, 120.0)
    assert report.overall_total_cost == 480.0
    assert all(row.inventory == (12, 12, 12, 12) for row in report.rows)


def test_retailer_backorders_when_demand_exceeds_stock():
    actors = step_week(initial_actors(), demand=30, orders=[4, 4, 4, 4])
    retailer = actors[0]

    assert retailer.inventory == 0
    assert retailer.backorder == 14
    assert retailer.weekly_cost == [14.0]


def test_step_week_leaves_input_states_untouched():
    before = initial_actors()
    after = step_week(before, demand=30, orders=[10, 10, 10, 10])

    assert all(actor.inventory == 12 for actor in before)
    assert all(list(actor.incoming_shipments) == [4, 4] for actor in before)
    assert all(actor.weekly_order == [] for actor in before)
    assert all(a is not b for a, b in zip(before, after))


def test_shipment_is_pushed_to_downstream_pipeline():
    before = initial_actors()
    after = step_week(before, demand=4, orders=[4, 4, 4, 4])

    for stage in range(1, 4):
        arrival = before[stage].incoming_shipments.pop()
        shipped = before[stage].inventory + arrival - after[stage].inventory
        assert list(after[stage - 1].incoming_shipments)[-1] == shipped


def test_retailer_order_reaches_retailer_after_two_lead_times():
    orders = [[10, 4, 4, 4]]
    report = simulate_beer_game(weeks=5, demand=[4] * 5, orders=orders)

    assert report.actor("wholesaler").weekly_inventory[:3] == (12, 12, 6)
    assert report.actor("retailer").weekly_inventory == (12, 12, 12, 12, 18)
    assert report.actor("retailer").weekly_order == (10, 4, 4, 4, 4)


def test_manufacturer_order_becomes_own_shipment_after_lead_time():
    report = simulate_beer_game(weeks=3, demand=[4, 4, 4], orders=[[4, 4, 4, 9]])

    assert report.actor("manufacturer").weekly_inventory == (12, 12, 17)


def test_missing_and_invalid_orders_default_to_four():
    assert resolve_order_row([[6]], 0) == [6, 4, 4, 4]
    assert resolve_order_row([[None, "x", -2, 0]], 0) == [4, 4, 4, 0]
    assert resolve_order_row([[1, 2, 3, 4]], 5) == [4, 4, 4, 4]

    report = simulate_beer_game(weeks=4, demand=[4] * 4, orders=[[7, 7, 7, 7]])
    for actor in report.actors:
        assert actor.weekly_order == (7, 4, 4, 4)


def test_missing_demand_defaults_to_four():
    report = simulate_beer_game(weeks=3, demand=[4])

    assert report.total_costs == (18.0, 18.0, 18.0, 18.0)


def test_stock_and_backorder_never_both_positive():
    weeks = 30
    demand = generate_external_demand(weeks=weeks, minimum=0, maximum=20, seed=7)
    orders = [
        [week % 9, (week * 3) % 11, (week * 5) % 7, (week * 2) % 13]
        for week in range(weeks)
    ]
    report = simulate_beer_game(weeks=weeks, demand=demand, orders=orders)

    for actor in report.actors:
        for inventory, backorder in zip(actor.weekly_inventory, actor.weekly_backorder):
            assert inventory >= 0
            assert backorder >= 0
            assert min(inventory, backorder) == 0
        assert actor.total_cost == sum(actor.weekly_cost)


def test_identical_inputs_give_identical_reports():
    demand = generate_external_demand(weeks=12, seed=3)
    orders = [[5, 6, 7, 8]] * 6

    first = simulate_beer_game(weeks=12, demand=demand, orders=orders)
    second = simulate_beer_game(weeks=12, demand=demand, orders=orders)

    assert first == second


def test_report_rows_are_indexed_from_week_one():
    report = simulate_beer_game(weeks=2, demand=[4, 30])

    assert [row.week for row in report.rows] == [1, 2]
    assert report.rows[0].cost == (6.0, 6.0, 6.0, 6.0)
    assert report.rows[1].backorder[0] == 14


def test_report_fills_short_histories_with_zero():
    report = build_simulation_report(initial_actors(), weeks=2)

    assert report.rows[1].inventory == (0, 0, 0, 0)
    assert report.overall_total_cost == 0


def test_simulate_beer_games_runs_independently():
    reports = simulate_beer_games(
        {
            "steady": GameConfig(weeks=4, demand=[4] * 4),
            "spike": GameConfig(weeks=4, demand=[4, 30, 4, 4]),
        }
    )

    assert reports["steady"].overall_total_cost == 96.0
    assert reports["spike"].overall_total_cost != 96.0


def test_invalid_week_count_raises():
    with pytest.raises(ValueError, match="Weeks must be positive"):
        simulate_beer_game(weeks=0)


def test_step_week_requires_four_actors():
    with pytest.raises(ValueError, match="Expected 4 actors"):
        step_week(initial_actors()[:3], demand=4, orders=[4, 4, 4, 4])


def test_large_integer_quantities_are_kept_exactly():
    assert coerce_quantity(2**60 + 1, 4) == 2**60 + 1
    assert coerce_quantity(-(2**60), 4) == 4
    assert resolve_order_row([[2**60 + 1]], 0) == [2**60 + 1, 4, 4, 4]


def test_zero_demand_is_kept():
    assert resolve_demand([0, None], 0) == 0
    assert resolve_demand([0, None], 1) == 4


def test_missing_demand_source_uses_default_demand():
    report = simulate_beer_game(weeks=2, demand=None)

    assert report.total_costs == (12.0, 12.0, 12.0, 12.0)
