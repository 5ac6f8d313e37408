import numpy as np
import pytest

from geometry import POWER_SOURCE_FOOTPRINT
from scheduler import FrameScheduler
from simulation import Simulation


@pytest.fixture
def sim(params):
    return Simulation(params)


def positions(sim):
    return sim.circulation.carriers.track_positions.copy()


def test_initial_state(sim):
    assert sim.closed is False
    assert sim.dead is False
    assert sim.energized is False
    assert sim.frame_count == 0


def test_first_tick_measures_zero_elapsed(sim):
    sim.toggle()
    before = positions(sim)
    sim.tick(5000.0)
    np.testing.assert_array_equal(positions(sim), before)
    assert sim.clock == 0.0
    sim.tick(6000.0)
    assert sim.clock == pytest.approx(1.0)


def test_energized_carrier_wraps_in_one_second(sim):
    sim.circulation.carriers.track_positions[:] = 2030.0
    sim.toggle()
    sim.tick(0.0)
    sim.tick(1000.0)
    np.testing.assert_allclose(positions(sim), 10.0)


def test_open_circuit_freezes_carriers(sim):
    before = positions(sim)
    for t in range(0, 5000, 16):
        sim.tick(float(t))
    np.testing.assert_array_equal(positions(sim), before)
    assert sim.battery.stored_charge == 100.0
    assert len(sim.chemistry) == 0


def test_battery_drains_per_energized_second(sim):
    sim.toggle()
    sim.tick(0.0)
    for n in range(1, 6):
        sim.tick(n * 1000.0)
        assert sim.battery.stored_charge == 100.0 - 5.0 * n


def test_depletion_stops_carriers_in_the_same_frame(params):
    params["drain_rate"] = 50.0
    sim = Simulation(params)
    sim.toggle()
    sim.tick(0.0)
    sim.tick(1000.0)
    assert sim.battery.stored_charge == 50.0
    before = positions(sim)

    sim.tick(2000.0)
    assert sim.dead is True
    assert sim.energized is False
    np.testing.assert_array_equal(positions(sim), before)


def test_depletion_restarts_the_timing_baseline(params):
    params["drain_rate"] = 100.0
    sim = Simulation(params)
    sim.toggle()
    sim.tick(0.0)
    sim.tick(1000.0)
    assert sim.dead is True
    clock = sim.clock
    sim.tick(4000.0)
    assert sim.clock == clock
    sim.tick(4500.0)
    assert sim.clock == pytest.approx(clock + 0.5)


def test_toggle_on_dead_battery_is_a_full_reset(params):
    params["drain_rate"] = 100.0
    sim = Simulation(params)
    sim.toggle()
    sim.tick(0.0)
    sim.tick(1000.0)
    assert sim.dead and sim.closed

    sim.toggle()
    assert sim.closed is False
    assert sim.dead is False
    assert sim.battery.stored_charge == 100.0
    assert sim.battery.ion_budget == 100.0


def test_toggle_on_live_battery_only_flips_the_switch(sim):
    sim.battery.stored_charge = 40.0
    sim.battery.ion_budget = 25.0
    sim.toggle()
    assert sim.closed is True
    sim.toggle()
    assert sim.closed is False
    assert sim.battery.stored_charge == 40.0
    assert sim.battery.ion_budget == 25.0
    assert sim.dead is False


def test_toggle_restarts_the_timing_baseline(sim):
    sim.toggle()
    sim.tick(0.0)
    sim.tick(1000.0)
    sim.toggle()
    sim.toggle()
    before = positions(sim)
    sim.tick(9000.0)
    np.testing.assert_array_equal(positions(sim), before)
    assert sim.battery.stored_charge == 95.0


def test_clock_going_backwards_is_clamped(sim):
    sim.toggle()
    sim.tick(1000.0)
    before = positions(sim)
    sim.tick(500.0)
    np.testing.assert_array_equal(positions(sim), before)


def test_chemistry_in_flight_keeps_moving_after_opening(sim, fake_rng):
    sim.chemistry.maybe_spawn(True, fake_rng(0.1, 0.0, 0.0))
    start = sim.chemistry.positions.copy()
    sim.tick(0.0)
    sim.tick(100.0)
    assert sim.energized is False
    assert len(sim.chemistry) == 1
    assert not np.array_equal(sim.chemistry.positions, start)


def test_chemistry_spawns_only_while_energized(sim):
    for t in range(0, 2000, 16):
        sim.tick(float(t))
    assert len(sim.chemistry) == 0
    sim.toggle()
    for t in range(2000, 2500, 16):
        sim.tick(float(t))
    assert sim.chemistry._next_id > 0


def test_start_and_stop_with_scheduler(sim):
    scheduler = FrameScheduler()
    sim.start(scheduler)
    sim.start(scheduler)
    assert scheduler.pending == 1

    scheduler.run_frame(0.0)
    scheduler.run_frame(16.0)
    assert sim.frame_count == 2
    assert scheduler.pending == 1

    sim.stop()
    assert scheduler.pending == 0
    scheduler.run_frame(32.0)
    assert sim.frame_count == 2


def test_restart_measures_zero_elapsed(sim):
    scheduler = FrameScheduler()
    sim.toggle()
    sim.start(scheduler)
    scheduler.run_frame(0.0)
    scheduler.run_frame(1000.0)
    sim.stop()

    before = positions(sim)
    sim.start(scheduler)
    scheduler.run_frame(60000.0)
    np.testing.assert_array_equal(positions(sim), before)


def test_snapshot_is_a_read_only_copy(sim):
    sim.toggle()
    sim.tick(0.0)
    snap = sim.snapshot()
    assert snap.closed is True and snap.energized is True
    assert snap.carrier_points.shape == (200, 2)
    assert snap.carrier_visible.shape == (200,)
    for array in (snap.carrier_points, snap.carrier_visible, snap.transient_points,
                  snap.field_markers, snap.carrier_vibrations):
        assert not array.flags.writeable

    points = snap.carrier_points.copy()
    sim.tick(1000.0)
    np.testing.assert_array_equal(snap.carrier_points, points)


def test_snapshot_field_markers_avoid_battery(sim):
    markers = sim.snapshot().field_markers
    assert len(markers) > 0
    for x, y, _ in markers:
        assert not POWER_SOURCE_FOOTPRINT.contains(x, y)


def test_same_seed_same_run(params):
    a, b = Simulation(params), Simulation(params)
    for sim in (a, b):
        sim.toggle()
        for t in range(0, 3000, 16):
            sim.tick(float(t))
    np.testing.assert_array_equal(a.snapshot().carrier_points, b.snapshot().carrier_points)
    np.testing.assert_array_equal(a.chemistry.ids, b.chemistry.ids)


def test_instances_are_independent(params):
    a, b = Simulation(params), Simulation(params)
    a.toggle()
    a.tick(0.0)
    a.tick(1000.0)
    assert b.closed is False
    assert b.battery.stored_charge == 100.0


@pytest.mark.parametrize("key, bad", [
    ("carrier_count", 0),
    ("field_marker_spacing", 0.0),
    ("spawn_probability", 2.0),
])
def test_rejects_invalid_configuration(params, key, bad):
    params[key] = bad
    with pytest.raises(ValueError):
        Simulation(params)
