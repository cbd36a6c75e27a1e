import pytest

from pc_power_sim.simulate import HistoryBuffer, SimulationState, Store
from pc_power_sim.system import SimulationConfig


def test_history_evicts_oldest():
    history = HistoryBuffer(capacity=3)
    for i in range(5):
        history = history.append(100.0 + i, 40.0 + i, float(i))
    assert len(history) == 3
    assert [s.value for s in history.power] == [102.0, 103.0, 104.0]
    assert [s.time for s in history.temperature] == [2.0, 3.0, 4.0]
    power, temp = history.at(0)
    assert power.value == 102.0
    assert temp.value == 42.0


def test_history_frame():
    history = HistoryBuffer(capacity=10).append(250.0, 55.0, 1.0).append(260.0, 56.5, 2.0)
    frame = history.to_frame()
    assert list(frame.columns) == ["time", "power", "cpu_temp"]
    assert frame["power"].max() == 260.0
    assert HistoryBuffer().to_frame().empty


def test_history_requires_capacity():
    with pytest.raises(ValueError):
        HistoryBuffer(capacity=0)


def test_initial_state():
    state = SimulationState.initial(SimulationConfig(ambient_temp=30.0), max_history=5)
    assert state.thermal.cpu_temp == 30.0
    assert state.history.capacity == 5
    assert state.history_index == -1
    assert not state.is_running
    assert state.workload_explanation


def test_store_notifies_in_order_and_unsubscribes():
    store = Store(SimulationState.initial(SimulationConfig()))
    calls = []
    store.subscribe(lambda s: calls.append(("first", s.speed)))
    unsubscribe = store.subscribe(lambda s: calls.append(("second", s.speed)))

    store.set(speed=2.0)
    assert calls == [("first", 2.0), ("second", 2.0)]
    assert store.get().speed == 2.0

    unsubscribe()
    unsubscribe()
    store.set(speed=3.0)
    assert calls[-1] == ("first", 3.0)
    assert len(calls) == 3


def test_history_append_leaves_original_untouched():
    empty = HistoryBuffer(capacity=2)
    one = empty.append(100.0, 40.0, 1.0)
    assert len(empty) == 0
    assert len(one) == 1
    assert len(one.cleared()) == 0
    assert one.cleared().capacity == 2
