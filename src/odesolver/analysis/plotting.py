from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Optional

import numpy as np
import matplotlib.pyplot as plt

from odesolver.model import Trajectory, TrajectoryPair

if TYPE_CHECKING:
    from matplotlib.axes import Axes


def _prepare_axes(ax: Optional[Axes]) -> Axes:
    if ax is not None:
        return ax

    plt.rcParams["figure.constrained_layout.use"] = True
    fig = plt.figure(figsize=(7, 5))
    return fig.add_subplot()


def _decorate(ax: Axes, title: str) -> None:
    ax.grid(visible=True, which='major', axis='both', linestyle='-', color='gray', lw=0.5)
    ax.minorticks_on()
    ax.grid(visible=True, which='minor', axis='both', linestyle=':', color='gray', lw=0.5)

    ax.set_title(title)
    ax.set_xlabel("x")
    ax.set_ylabel("y")
    ax.legend()


def plot_trajectory(
    trajectory: Trajectory,
    exact_fn: Optional[Callable[[float], float]] = None,
    ax: Optional[Axes] = None,
    show: bool = False,
) -> Axes:
    """
    Plot an approximate solution, optionally against the exact one.

    Args:
        trajectory: Result of one of the drivers.
        exact_fn: Exact solution as a function of x, drawn as a smooth curve.
        ax: Axes to draw on; a new figure is created when omitted.
        show: Call plt.show() when done.

    Returns:
        The axes drawn on.
    """
    ax = _prepare_axes(ax)
    xs = trajectory.xs

    if exact_fn is not None:
        fine_xs = np.linspace(xs[0], xs[-1], 500)
        ax.plot(fine_xs, [exact_fn(x) for x in fine_xs], 'k--', lw=1, label="exact")

    ax.plot(xs, trajectory.ys, 'o-', lw=2, ms=3, label=trajectory.integrator)

    _decorate(ax, f"Approximate solution ({trajectory.integrator})")
    if show:
        plt.show()
    return ax


def plot_dual(pair: TrajectoryPair, ax: Optional[Axes] = None, show: bool = False) -> Axes:
    """
    Plot both runs of a pair; points without data are left out.
    """
    ax = _prepare_axes(ax)

    for label, trajectory in (("y1", pair.first), ("y2", pair.second)):
        ax.plot(trajectory.xs, trajectory.ys, 'o-', lw=2, ms=3, label=label)

    _decorate(ax, f"Two equations ({pair.first.integrator})")
    if show:
        plt.show()
    return ax
