import pytest

from nucleares.core.history import IodineHistory, ReactivityHistory, SampleHistory


def test_reactivity_history_keeps_last_three():
    h = ReactivityHistory()
    for r in [0.5, -0.1, 0.2, 0.4, 0.0]:
        h.push(r)
        assert len(h) <= 3
    assert list(h) == [0.2, 0.4, 0.0]
    assert h.average() == pytest.approx(0.2)


@pytest.mark.parametrize("samples", [[0.1], [0.1, 0.3], [-0.3, 0.0, 0.9]])
def test_average_is_mean_of_contents(samples):
    h = ReactivityHistory(samples)
    assert h.average() == pytest.approx(sum(samples) / len(samples))


def test_iodine_history_capacity_is_configurable():
    h = IodineHistory(10)
    for i in range(25):
        h.push(float(i))
    assert len(h) == 10
    assert list(h)[0] == 15.0
    assert h.average() == pytest.approx(19.5)


def test_empty_history_averages_to_zero():
    assert SampleHistory(4).average() == 0.0


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        SampleHistory(0)
