import copy

import pytest

from pc_power_sim.hardware import build_catalog
from pc_power_sim.simulate import ManualClock, Simulation
from pc_power_sim.system import SimulationConfig
from pc_power_sim.workloads import Workload

CATALOG_DATA = {
    "cpus": [
        {
            "id": "cpu-ddr4",
            "name": "Test CPU DDR4",
            "generation": "Gen A",
            "tdp": 125,
            "idle_power": 10,
            "light_load_power": 30,
            "gaming_power": 80,
            "rendering_power": 190,
            "stress_power": 250,
            "short_boost_power": 250,
            "short_boost_duration": 10,
            "base_clock": 3.2,
            "boost_clock": 5.2,
            "all_core_turbo": 4.9,
            "max_safe_temp": 100,
            "throttle_temp": 95,
            "supported_memory": ["DDR4"],
        },
        {
            "id": "cpu-ddr5",
            "name": "Test CPU DDR5",
            "generation": "Gen B",
            "tdp": 105,
            "idle_power": 20,
            "gaming_power": 60,
            "rendering_power": 85,
            "stress_power": 90,
            "max_safe_temp": 90,
            "supported_memory": ["DDR5"],
        },
    ],
    "gpus": [
        {
            "id": "gpu-big",
            "name": "Test GPU",
            "board_power": 450,
            "idle_draw": 20,
            "gaming_draw": 380,
            "rendering_draw": 430,
            "stress_draw": 450,
            "transient_multiplier": 1.8,
        },
        {
            "id": "gpu-mid",
            "name": "Test GPU Mid",
            "board_power": 200,
            "idle_draw": 10,
            "gaming_draw": 185,
            "rendering_draw": 195,
            "stress_draw": 200,
        },
    ],
    "psus": [
        {
            "id": "psu-850",
            "name": "850W Gold",
            "wattage": 850,
            "rating": "80+ Gold",
            "transient_response": 0.85,
            "efficiency": {0: 0.80, 20: 0.88, 50: 0.92, 100: 0.87},
        },
        {
            "id": "psu-1200",
            "name": "1200W Platinum",
            "wattage": 1200,
            "rating": "80+ Platinum",
            "transient_response": 0.92,
            "efficiency": {0: 0.82, 50: 0.94, 100: 0.89},
        },
    ],
    "cooling": [
        {
            "id": "aio-240",
            "name": "240mm AIO",
            "heat_dissipation": 250,
            "thermal_mass": 1.2,
            "response_time": 3.0,
            "airflow_effectiveness": 0.85,
            "noise_baseline": 22,
            "noise_max": 40,
            "max_recommended_tdp": 200,
        },
        {
            "id": "stock",
            "name": "Stock Cooler",
            "heat_dissipation": 95,
            "thermal_mass": 0.3,
            "response_time": 1.5,
            "airflow_effectiveness": 0.7,
            "max_recommended_tdp": 65,
        },
    ],
    "memory": [
        {"id": "ddr4-16", "type": "DDR4", "capacity": 16, "idle_power": 2.5, "load_power": 5.0},
        {"id": "ddr5-16", "type": "DDR5", "capacity": 16, "idle_power": 2.8, "load_power": 6.0},
        {"id": "ddr3-16", "type": "DDR3", "capacity": 16, "idle_power": 3.0, "load_power": 5.5},
    ],
}


@pytest.fixture
def catalog_data():
    return copy.deepcopy(CATALOG_DATA)


@pytest.fixture
def catalog(catalog_data):
    return build_catalog(catalog_data)


@pytest.fixture
def cpu(catalog):
    return catalog.find("cpu", "cpu-ddr4")


@pytest.fixture
def gpu(catalog):
    return catalog.find("gpu", "gpu-big")


@pytest.fixture
def psu(catalog):
    return catalog.find("psu", "psu-850")


@pytest.fixture
def cooler(catalog):
    return catalog.find("cooling", "aio-240")


@pytest.fixture
def config(catalog, cpu, gpu, psu, cooler):
    return SimulationConfig(
        cpu=cpu,
        gpu=gpu,
        memory=catalog.find("memory", "ddr4-16"),
        psu=psu,
        cooling=cooler,
        workload=Workload.GAMING,
    )


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def simulation(catalog, config, clock):
    sim = Simulation(catalog, config, clock=clock)
    sim.initialize()
    return sim
