from dataclasses import replace

import pytest

from pc_power_sim.thermal import (
    ThermalInputs,
    ThermalNarrative,
    calculate_cooling_capacity,
    calculate_effective_cooling,
    calculate_equilibrium_temp,
    calculate_fan_speed,
    calculate_noise,
    calculate_time_to_equilibrium,
    classify,
    create_thermal_state,
    step_throttle,
    update_thermal_state,
    with_ambient,
)


def make_inputs(cooler, cpu_power=150.0, delta_time=0.1, **overrides):
    values = dict(
        cpu_power=cpu_power,
        gpu_power=200.0,
        memory_heat=0.1,
        storage_heat=0.02,
        psu_heat_waste=40.0,
        cooling=cooler,
        fan_count=4,
        airflow_quality=0.85,
        max_cpu_temp=100.0,
        throttle_temp=95.0,
        delta_time=delta_time,
    )
    values.update(overrides)
    return ThermalInputs(**values)


def test_initial_state_seeded_at_ambient():
    state = create_thermal_state(22.0)
    assert state.cpu_temp == 22.0
    assert state.case_temp == 24.0
    assert state.fan_speed == 20.0
    assert not state.is_throttling


def test_cpu_temp_never_below_ambient(cooler):
    state = replace(create_thermal_state(25.0), cpu_temp=90.0, case_temp=45.0)
    schedule = [0.1, 2.0, 5.0, 0.0, 20.0] * 20
    for i, dt in enumerate(schedule):
        cpu_power = 0.0 if i % 2 else 250.0
        cooling = None if i % 7 == 0 else cooler
        state = update_thermal_state(state, make_inputs(cooling, cpu_power, dt))
        assert state.cpu_temp >= state.ambient_temp
        assert state.ambient_temp <= state.case_temp <= state.ambient_temp + 25


def test_temperature_approaches_equilibrium(cooler):
    state = create_thermal_state(25.0)
    temps = []
    for _ in range(200):
        state = update_thermal_state(state, make_inputs(cooler, 150.0, 0.5))
        temps.append(state.cpu_temp)
    assert temps[-1] > temps[0]
    assert abs(state.cpu_temp - state.equilibrium_temp) < abs(temps[0] - state.equilibrium_temp)


def test_zero_delta_time_keeps_temperatures(cooler):
    state = replace(create_thermal_state(25.0), cpu_temp=60.0)
    updated = update_thermal_state(state, make_inputs(cooler, 200.0, 0.0))
    assert updated.cpu_temp == 60.0
    assert updated.fan_speed == state.fan_speed
    assert updated.equilibrium_temp > 25.0


def test_throttle_hysteresis():
    threshold = 95.0
    throttle = 0.0
    history = []
    for _ in range(150):
        throttle = step_throttle(throttle, threshold + 10, threshold)
        history.append(throttle)
    assert all(b >= a for a, b in zip(history, history[1:]))
    assert throttle == pytest.approx(40.0, abs=1e-3)

    # Inside the hysteresis band nothing changes
    assert step_throttle(throttle, threshold - 2, threshold) == throttle

    ticks = 0
    while throttle > 0:
        released = step_throttle(throttle, threshold - 5, threshold)
        assert released < throttle
        throttle = released
        ticks += 1
        assert ticks < 100
    assert throttle == 0.0


def test_throttle_capped():
    throttle = 0.0
    for _ in range(300):
        throttle = step_throttle(throttle, 150.0, 95.0)
    assert throttle == pytest.approx(95.0, abs=1e-3)


def test_equilibrium_rises_with_heat_and_falls_with_capacity(cooler):
    capacity = calculate_cooling_capacity(cooler, 4, 50.0, 0.85, 27.0)
    low = calculate_equilibrium_temp(100.0, cooler, capacity, 25.0, 27.0)
    high = calculate_equilibrium_temp(200.0, cooler, capacity, 25.0, 27.0)
    assert high > low

    bigger = replace(cooler, heat_dissipation=cooler.heat_dissipation * 2)
    bigger_capacity = calculate_cooling_capacity(bigger, 4, 50.0, 0.85, 27.0)
    cooler_eq = calculate_equilibrium_temp(200.0, bigger, bigger_capacity, 25.0, 27.0)
    assert cooler_eq - 25.0 < high - 25.0


def test_no_cooler_equilibrium_is_ambient():
    assert calculate_cooling_capacity(None, 4, 50.0, 0.85, 30.0) == 100.0
    assert calculate_equilibrium_temp(300.0, None, 100.0, 25.0, 30.0) == 25.0


def test_cooling_capacity_floor(cooler):
    weak = replace(cooler, heat_dissipation=10.0)
    assert calculate_cooling_capacity(weak, 1, 0.0, 0.0, 60.0) == 50.0


def test_airflow_penalty_band(cooler):
    open_bench = calculate_cooling_capacity(cooler, 1, 100.0, 1.0, 30.0)
    restricted = calculate_cooling_capacity(cooler, 1, 100.0, 0.0, 30.0)
    assert restricted / open_bench == pytest.approx(0.55)


def test_fan_curve():
    assert calculate_fan_speed(30.0, 100.0, 25.0) == 20.0
    assert calculate_fan_speed(100.0, 100.0, 25.0) == 100.0
    assert calculate_fan_speed(96.0, 100.0, 25.0) == pytest.approx(92.5)
    mid = calculate_fan_speed(60.0, 100.0, 25.0)
    assert 20.0 < mid < 85.0


def test_noise(cooler):
    assert calculate_noise(None, 50.0, 4) == 30.0
    assert calculate_noise(cooler, 0.0, 1) == pytest.approx(cooler.noise_baseline)
    assert calculate_noise(cooler, 100.0, 4) == pytest.approx(cooler.noise_max + 4.0)


def test_time_to_equilibrium():
    assert calculate_time_to_equilibrium(50.0, 50.5, 1.0) == 0.0
    assert calculate_time_to_equilibrium(30.0, 70.0, 1.23) == pytest.approx(1.23 * 600)


def test_raising_ambient_lifts_temperatures():
    state = create_thermal_state(25.0)
    warmer = with_ambient(state, 35.0)
    assert warmer.ambient_temp == 35.0
    assert warmer.cpu_temp == 35.0
    assert warmer.case_temp == 35.0


def test_effective_cooling_summary(cooler):
    summary = calculate_effective_cooling(cooler, 4, 1.0)
    assert summary["airflow_penalty"] == pytest.approx(1.0)
    assert summary["fan_bonus"] == pytest.approx(1.16)
    assert calculate_effective_cooling(None, 4, 1.0)["capacity"] == 100.0


def test_narrative_priority(cooler):
    args = dict(cpu_temp=60.0, equilibrium_temp=70.0, max_cpu_temp=100.0, heat_generated=50.0, cooling_capacity=200.0)
    assert classify(None, throttle_percent=10.0, **args) is ThermalNarrative.NO_COOLER
    assert classify(cooler, throttle_percent=10.0, **dict(args, equilibrium_temp=120.0)) is ThermalNarrative.THROTTLING
    assert classify(cooler, throttle_percent=0.0, **dict(args, equilibrium_temp=120.0)) is ThermalNarrative.EQUILIBRIUM_EXCEEDED
    assert classify(cooler, throttle_percent=0.0, **dict(args, equilibrium_temp=97.0)) is ThermalNarrative.LOW_HEADROOM
    assert classify(cooler, throttle_percent=0.0, **dict(args, heat_generated=180.0)) is ThermalNarrative.HIGH_LOAD
    assert classify(cooler, throttle_percent=0.0, **args) is ThermalNarrative.WARMING
    assert classify(cooler, throttle_percent=0.0, **dict(args, cpu_temp=80.0)) is ThermalNarrative.COOLING
    assert classify(cooler, throttle_percent=0.0, **dict(args, cpu_temp=71.0)) is ThermalNarrative.STABLE


def test_update_sets_explanation(cooler):
    state = update_thermal_state(create_thermal_state(25.0), make_inputs(cooler))
    assert state.explanation
    assert update_thermal_state(state, make_inputs(None)).explanation == "No cooling solution selected."


def test_case_temp_settles_with_strong_exhaust_and_long_steps(cooler):
    state = replace(create_thermal_state(25.0), case_temp=45.0)
    inputs = make_inputs(cooler, delta_time=20.0, fan_count=10, airflow_quality=1.0)
    temps = []
    for _ in range(8):
        state = update_thermal_state(state, inputs)
        temps.append(state.case_temp)
    assert all(25.0 <= t <= 50.0 for t in temps)
    # Falls from the warm start and then holds instead of bouncing between clamps
    assert all(later <= earlier + 1e-9 for earlier, later in zip(temps, temps[1:]))
    assert temps[-1] == pytest.approx(temps[-2])
