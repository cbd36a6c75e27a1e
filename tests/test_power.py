import pytest

from pc_power_sim.power import (
    BoostState,
    ClockJitter,
    calculate_cpu_power,
    calculate_fixed_power,
    calculate_gpu_power,
    calculate_memory_power,
    calculate_storage_power,
    calculate_total_power,
    fan_power_each,
)
from pc_power_sim.system import RgbLevel, SimulationConfig, StorageConfig
from pc_power_sim.workloads import LoadType, Workload


@pytest.mark.parametrize("throttle", [0.0, 25.0, 50.0, 95.0])
def test_idle_never_below_idle_draw(cpu, gpu, throttle):
    cpu_power = calculate_cpu_power(cpu, Workload.IDLE, BoostState(), throttle)
    gpu_power = calculate_gpu_power(gpu, Workload.IDLE, 25.0, throttle)
    assert cpu_power.current >= cpu.idle_power
    assert gpu_power.sustained >= gpu.idle_draw


def test_throttle_lowers_cpu_target_and_gpu_draw(cpu, gpu):
    previous_target = None
    previous_gpu = None
    for throttle in [0.0, 10.0, 30.0, 60.0, 95.0]:
        target = calculate_cpu_power(cpu, Workload.RENDERING, BoostState(), throttle).target
        gpu_draw = calculate_gpu_power(gpu, Workload.RENDERING, 25.0, throttle).sustained
        if previous_target is not None:
            assert target < previous_target
            assert gpu_draw <= previous_gpu
        previous_target, previous_gpu = target, gpu_draw


def test_cpu_boost_window_uses_short_boost_power(cpu):
    state = BoostState(current_power=190.0, boost_time_remaining=5.0, boost_active=True)
    result = calculate_cpu_power(cpu, Workload.STRESS, state)
    assert result.is_boost
    assert result.target == pytest.approx(250.0)
    assert result.clock_speed == pytest.approx(cpu.boost_clock)
    assert result.clock_mode == "Boost (all cores)"


def test_cpu_without_boost_window_uses_sustained_draw(cpu):
    result = calculate_cpu_power(cpu, Workload.RENDERING, BoostState())
    assert not result.is_boost
    assert result.target == pytest.approx(190.0)
    assert result.clock_speed == pytest.approx(cpu.all_core_turbo)


def test_cpu_power_eases_toward_target(cpu):
    result = calculate_cpu_power(cpu, Workload.GAMING, BoostState(current_power=100.0))
    assert result.current == pytest.approx(100.0 + (80.0 - 100.0) * 0.15)


def test_cpu_throttle_label_and_clock(cpu):
    result = calculate_cpu_power(cpu, Workload.RENDERING, BoostState(), 20.0)
    assert result.clock_mode == "Throttled (-20%)"
    assert result.clock_speed == pytest.approx(cpu.all_core_turbo * 0.8)


def test_gpu_leakage_and_transient(gpu):
    result = calculate_gpu_power(gpu, Workload.GAMING, ambient_temp=35.0)
    assert result.sustained == pytest.approx(380.0 * 1.03)
    assert result.transient == pytest.approx(380.0 * 1.03 * 1.8)
    assert result.leakage_added == pytest.approx(380.0 * 0.03)


def test_gpu_idle_has_no_spike(gpu):
    result = calculate_gpu_power(gpu, Workload.IDLE)
    assert result.transient == pytest.approx(result.sustained)
    assert result.clock_speed == pytest.approx(210.0)


def test_memory_power_by_generation(catalog):
    ddr4 = calculate_memory_power(catalog.find("memory", "ddr4-16"), Workload.GAMING)
    ddr3 = calculate_memory_power(catalog.find("memory", "ddr3-16"), Workload.GAMING)
    assert ddr4.power == pytest.approx(2.5 + 2.5 * 0.55)
    assert ddr3.power == pytest.approx((3.0 + 2.5 * 0.55) * 1.3)
    assert ddr4.heat == pytest.approx(0.1 * 0.55)


def test_missing_memory_is_zero():
    result = calculate_memory_power(None, Workload.STRESS)
    assert result.power == 0
    assert result.heat == 0


def test_storage_power_scales_for_compiling():
    storage = StorageConfig(nvme=1, hdd=2)
    gaming = calculate_storage_power(storage, Workload.GAMING)
    assert gaming.power == pytest.approx((1.0 + 2.5 * 0.3) + (4.2 * 2 + 3.3 * 0.3 * 2))

    # 0.85 * 1.4 caps at full activity
    compiling = calculate_storage_power(StorageConfig(nvme=1), Workload.COMPILING)
    assert compiling.power == pytest.approx(3.5)
    assert compiling.heat == pytest.approx(0.015)


def test_fan_power_curve():
    assert fan_power_each(0) == pytest.approx(1.0)
    assert fan_power_each(100) == pytest.approx(4.8)
    assert fan_power_each(50) < (1.0 + 4.8) / 2


def test_fixed_power_by_intensity():
    config = SimulationConfig(workload=Workload.IDLE, fan_count=3, rgb_level=RgbLevel.EXTENSIVE)
    fixed = calculate_fixed_power(config, fan_speed=0)
    assert fixed.motherboard == pytest.approx(18.0)
    assert fixed.peripherals == pytest.approx(8.0)
    assert fixed.rgb == pytest.approx(12.0)
    assert fixed.fans == pytest.approx(3.0)


def test_total_power_transient_replaces_gpu_term(config):
    result = calculate_total_power(config.with_changes(workload="stress"))
    assert result.sustained_total == pytest.approx(sum(result.components.values()))
    assert result.transient_peak - result.sustained_total == pytest.approx(
        result.gpu_transient - result.gpu
    )


def test_total_power_tolerates_empty_config():
    config = SimulationConfig()
    result = calculate_total_power(config)
    assert result.cpu == 0
    assert result.gpu == 0
    assert result.memory == 0
    assert result.transient_peak == pytest.approx(result.sustained_total)
    assert result.sustained_total > 0  # board, peripherals, fans, storage


def test_clock_jitter_is_seedable(cpu, gpu):
    a = ClockJitter(seed=7)
    b = ClockJitter(seed=7)
    assert a.cpu_clock(4.6, cpu, LoadType.GAMING) == b.cpu_clock(4.6, cpu, LoadType.GAMING)
    assert a.gpu_clock(1800.0, gpu, LoadType.GAMING) <= 1800.0
    assert ClockJitter(enabled=False).cpu_clock(4.6, cpu, LoadType.GAMING) == 4.6
