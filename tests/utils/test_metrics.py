# Tests for DiabeticTwin.utils.metrics

import pytest
import numpy as np
from DiabeticTwin.utils import metrics # Import the whole module to test its functions

def test_round_half_up():
    """Halves always round up, unlike the built-in round."""
    assert metrics.round_half_up(2.5) == 3.0
    assert metrics.round_half_up(3.5) == 4.0
    assert metrics.round_half_up(-2.5) == -2.0
    assert metrics.round_half_up(2.49) == 2.0
    assert metrics.round_half_up(148.5) == 149.0
    assert metrics.round_half_up(1.25, 1) == pytest.approx(1.3)
    assert metrics.round_half_up(0.756, 2) == pytest.approx(0.76)
    assert metrics.round_half_up(7.0, 1) == pytest.approx(7.0)

def test_safe_divide():
    assert metrics._safe_divide(10, 4) == 2.5
    assert metrics._safe_divide(10, 0) == 0.0
    assert metrics._safe_divide(10, 0, default_val=-1.0) == -1.0

def test_calculate_tir():
    """Test TIR calculation."""
    values = np.array([60, 70, 100, 180, 190, 150])
    # In range (70-180): 70, 100, 180, 150 (4 values)
    expected_tir = (4/6) * 100
    assert metrics.calculate_tir(values, lower_bound=70, upper_bound=180) == pytest.approx(expected_tir)

    assert metrics.calculate_tir(np.array([])) == 0.0
    assert metrics.calculate_tir([50, 60]) == 0.0 # All out of default range
    assert metrics.calculate_tir([80, 100, 170]) == 100.0 # All in default range
    print("test_calculate_tir: PASSED")

def test_calculate_variability():
    """Population standard deviation, not the sample one."""
    values = [100, 120, 140]
    expected = np.sqrt(((100 - 120) ** 2 + 0 + (140 - 120) ** 2) / 3)
    assert metrics.calculate_variability(values) == pytest.approx(expected)
    assert metrics.calculate_variability([110] * 24) == 0.0
    assert metrics.calculate_variability([]) == 0.0

def test_calculate_time_below_range():
    values = np.array([50, 60, 70, 80]) # 2 below 70
    assert metrics.calculate_time_below_range(values, threshold=70) == pytest.approx(50.0)
    assert metrics.calculate_time_below_range([]) == 0.0

def test_calculate_time_above_range():
    values = [150, 180, 181, 250] # 2 above 180
    assert metrics.calculate_time_above_range(values, threshold=180) == pytest.approx(50.0)
    assert metrics.calculate_time_above_range([]) == 0.0
