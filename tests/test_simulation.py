import pytest

from pc_power_sim.config import EngineSettings
from pc_power_sim.diagnostics import WarningType
from pc_power_sim.hardware import load_catalog
from pc_power_sim.simulate import Simulation
from pc_power_sim.workloads import Workload


def run_ticks(simulation, clock, count, step=0.5):
    for _ in range(count):
        clock.advance(step)
        simulation.tick()


def test_initialize_computes_snapshot(simulation):
    state = simulation.state
    assert state.power is not None
    assert state.psu is not None
    assert state.simulated_time == 0
    assert state.thermal.equilibrium_temp > state.thermal.ambient_temp
    assert state.effective_cooling["base_capacity"] == 250


def test_tick_requires_running(simulation, clock):
    clock.advance(1.0)
    assert simulation.tick() is False
    assert simulation.state.simulated_time == 0


def test_delta_time_clamped_after_stall(simulation, clock):
    simulation.start()
    clock.advance(10.0)
    assert simulation.tick()
    assert simulation.state.simulated_time == pytest.approx(2.0)


def test_speed_scales_and_clamps(simulation, clock):
    assert simulation.set_speed(50) == 10.0
    assert simulation.set_speed(0) == 0.25
    simulation.set_speed(2.0)
    simulation.start()
    run_ticks(simulation, clock, 1)
    assert simulation.state.simulated_time == pytest.approx(1.0)


def test_history_cadence(simulation, clock):
    simulation.start()
    run_ticks(simulation, clock, 8)
    assert len(simulation.history) == 4
    assert [s.time for s in simulation.history.power] == pytest.approx([1.0, 2.0, 3.0, 4.0])


def test_history_bounded_by_max_history(catalog, config, clock):
    simulation = Simulation(catalog, config, EngineSettings(max_history=3), clock=clock)
    simulation.initialize()
    simulation.start()
    run_ticks(simulation, clock, 10, step=1.0)
    assert len(simulation.history) == 3


def test_reset(simulation, clock):
    simulation.update_config(workload="stress")
    simulation.start()
    run_ticks(simulation, clock, 20)
    assert simulation.state.thermal.cpu_temp > 25.0

    simulation.reset()
    state = simulation.state
    assert state.simulated_time == 0
    assert len(simulation.history) == 0
    assert state.thermal.cpu_temp == pytest.approx(state.config.ambient_temp)
    assert state.boost.boost_time_remaining == 0
    assert state.power is not None
    assert state.psu is not None


def test_pause_and_resume(simulation, clock):
    simulation.start()
    run_ticks(simulation, clock, 2)
    simulation.pause()
    elapsed = simulation.state.simulated_time
    clock.advance(30.0)
    assert simulation.tick() is False

    simulation.resume()
    run_ticks(simulation, clock, 1)
    # The paused interval is not integrated
    assert simulation.state.simulated_time == pytest.approx(elapsed + 0.5)

    simulation.toggle_pause()
    assert simulation.state.is_paused


def test_history_scrubbing(simulation, clock):
    simulation.start()
    run_ticks(simulation, clock, 8)

    assert simulation.set_history_index(1) == 1
    assert simulation.state.is_paused
    power, temp = simulation.historical_values()
    assert power.time == pytest.approx(2.0)
    assert temp.time == pytest.approx(2.0)

    # The newest sample is the live view
    assert simulation.set_history_index(3) == -1
    assert simulation.historical_values() is None

    simulation.set_history_index(0)
    simulation.resume()
    assert simulation.state.history_index == -1


def test_cpu_change_swaps_incompatible_memory(simulation):
    assert simulation.select_hardware("cpu", "cpu-ddr5")
    state = simulation.state
    assert state.config.memory.id == "ddr5-16"
    assert "Switched memory to" in state.compatibility_warning
    assert not any(w.type is WarningType.MEMORY_INCOMPATIBLE for w in state.warnings)


def test_memory_change_flags_incompatibility(simulation):
    assert simulation.select_hardware("memory", "ddr5-16")
    state = simulation.state
    assert state.compatibility_warning
    assert any(w.type is WarningType.MEMORY_INCOMPATIBLE for w in state.warnings)

    simulation.select_hardware("memory", "ddr4-16")
    assert simulation.state.compatibility_warning is None


def test_select_unknown_hardware(simulation):
    before = simulation.state.config
    assert simulation.select_hardware("gpu", "does-not-exist") is False
    assert simulation.state.config == before
    with pytest.raises(ValueError):
        simulation.select_hardware("case", "mesh")


def test_select_gpu_recomputes_power(simulation):
    before = simulation.state.power.gpu
    simulation.select_hardware("gpu", "gpu-mid")
    assert simulation.state.power.gpu < before


def test_workload_change_opens_boost_window(simulation):
    simulation.update_config(workload=Workload.STRESS)
    boost = simulation.state.boost
    assert boost.boost_active
    assert boost.boost_time_remaining == pytest.approx(10.0)
    assert simulation.state.power.cpu_is_boost


def test_ambient_change_lifts_temperatures(simulation):
    simulation.update_config(ambient_temp=40.0)
    thermal = simulation.state.thermal
    assert thermal.ambient_temp == 40.0
    assert thermal.cpu_temp >= 40.0


def test_immediate_update_keeps_temperatures(simulation, clock):
    simulation.start()
    run_ticks(simulation, clock, 4)
    cpu_temp = simulation.state.thermal.cpu_temp
    time_before = simulation.state.simulated_time

    simulation.update_config(fan_count=6)
    assert simulation.state.thermal.cpu_temp == cpu_temp
    assert simulation.state.simulated_time == time_before
    assert simulation.state.config.fan_count == 6


def test_subscribers_see_committed_state(simulation, clock):
    seen = []
    unsubscribe = simulation.subscribe(lambda state: seen.append(state.simulated_time))
    simulation.start()
    run_ticks(simulation, clock, 2)
    assert seen[-1] == pytest.approx(1.0)

    unsubscribe()
    count = len(seen)
    run_ticks(simulation, clock, 1)
    assert len(seen) == count


def test_from_packaged_catalog(clock):
    simulation = Simulation.from_catalog(load_catalog(), clock=clock)
    state = simulation.state
    assert state.config.cpu is not None
    assert state.config.cpu.supports_memory(state.config.memory.type)
    assert state.power.sustained_total > 0


def test_delivered_history_is_not_rewritten(simulation, clock):
    simulation.start()
    run_ticks(simulation, clock, 4)
    snapshot = simulation.state
    assert len(snapshot.history) == 2

    run_ticks(simulation, clock, 4)
    assert len(simulation.history) == 4
    assert len(snapshot.history) == 2

    simulation.reset()
    assert len(simulation.history) == 0
    assert [s.time for s in snapshot.history.power] == pytest.approx([1.0, 2.0])


def test_cpu_change_starts_from_new_cpu_draw(simulation, clock):
    simulation.update_config(workload=Workload.STRESS)
    simulation.start()
    run_ticks(simulation, clock, 10)
    assert simulation.state.power.cpu > 150.0

    simulation.select_hardware("cpu", "cpu-ddr5")
    state = simulation.state
    assert state.power.cpu == pytest.approx(90.0)
    assert not state.boost.boost_active
    assert state.boost.boost_time_remaining == 0
