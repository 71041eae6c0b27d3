"""
Tests for the matplotlib helpers.

Run with: pytest tests/test_plotting.py -v
"""

import math

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pytest

from odesolver import combine_dual, integrate_fixed
from odesolver.analysis.plotting import plot_dual, plot_trajectory


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")


class TestPlotting:
    """Test that the helpers draw the expected lines."""

    def test_trajectory_alone(self):
        trajectory = integrate_fixed("y", "euler", 0.0, 1.0, 0.1, 10)
        ax = plot_trajectory(trajectory)
        assert len(ax.get_lines()) == 1
        assert list(ax.get_lines()[0].get_xdata()) == pytest.approx(list(trajectory.xs))

    def test_trajectory_with_exact(self):
        trajectory = integrate_fixed("y", "rk4", 0.0, 1.0, 0.1, 10)
        ax = plot_trajectory(trajectory, exact_fn=math.exp)
        labels = [line.get_label() for line in ax.get_lines()]
        assert labels == ["exact", "rk4"]

    def test_existing_axes(self):
        fig, ax = plt.subplots()
        trajectory = integrate_fixed("x", "heun", 0.0, 0.0, 0.5, 4)
        assert plot_trajectory(trajectory, ax=ax) is ax

    def test_dual(self):
        pair = combine_dual("y", "-y", "heun", 0.0, 1.0, 0.1, 10)
        ax = plot_dual(pair)
        assert [line.get_label() for line in ax.get_lines()] == ["y1", "y2"]
