from __future__ import annotations

from abc import ABC, abstractmethod
from enum import StrEnum
from typing import Callable, Union

RightHandSide = Callable[[float, float], float]


class IntegratorKind(StrEnum):
    EULER = "euler"
    HEUN = "heun"
    RK4 = "rk4"


class Integrator(ABC):
    """
    Abstract base class for single-step integration formulas.
    """
    KIND: IntegratorKind
    NAME: str = "Integrator"
    ORDER: int = 0

    @abstractmethod
    def step(self, f: RightHandSide, x: float, y: float, h: float) -> float:
        """
        Advance the solution of dy/dx = f(x, y) by one step.

        Args:
            f: Right-hand side of the equation.
            x: Current value of the independent variable.
            y: Solution estimate at x.
            h: Step size.

        Returns:
            Solution estimate at x + h.
        """
        pass

    def __call__(self, f: RightHandSide, x: float, y: float, h: float) -> float:
        return self.step(f, x, y, h)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class EulerIntegrator(Integrator):
    """
    Explicit Euler method, first order.
    """
    KIND = IntegratorKind.EULER
    NAME = "Euler"
    ORDER = 1

    def step(self, f: RightHandSide, x: float, y: float, h: float) -> float:
        return y + h * f(x, y)


class HeunIntegrator(Integrator):
    """
    Heun's method (Improved Euler), second order.

    An Euler predictor followed by a trapezoidal corrector.
    """
    KIND = IntegratorKind.HEUN
    NAME = "Improved Euler (Heun)"
    ORDER = 2

    def step(self, f: RightHandSide, x: float, y: float, h: float) -> float:
        slope = f(x, y)
        y_predicted = y + h * slope
        return y + (h / 2) * (slope + f(x + h, y_predicted))


class RungeKutta4Integrator(Integrator):
    """
    Classical fourth-order Runge-Kutta method.
    """
    KIND = IntegratorKind.RK4
    NAME = "Runge-Kutta 4"
    ORDER = 4

    def step(self, f: RightHandSide, x: float, y: float, h: float) -> float:
        k1 = h * f(x, y)
        k2 = h * f(x + h / 2, y + k1 / 2)
        k3 = h * f(x + h / 2, y + k2 / 2)
        k4 = h * f(x + h, y + k3)
        return y + (k1 + 2 * k2 + 2 * k3 + k4) / 6


INTEGRATORS: dict[IntegratorKind, Integrator] = {
    IntegratorKind.EULER: EulerIntegrator(),
    IntegratorKind.HEUN: HeunIntegrator(),
    IntegratorKind.RK4: RungeKutta4Integrator(),
}


def get_integrator(kind: Union[IntegratorKind, str, Integrator]) -> Integrator:
    """
    Resolve an integrator from its kind.

    Args:
        kind: An IntegratorKind, its string value ("euler", "heun", "rk4"),
            or an Integrator instance (returned as is).

    Raises:
        ValueError: If `kind` names no known integrator.
    """
    if isinstance(kind, Integrator):
        return kind
    try:
        return INTEGRATORS[IntegratorKind(kind)]
    except ValueError:
        known = ", ".join(k.value for k in IntegratorKind)
        raise ValueError(f"Unknown integrator '{kind}'. Expected one of: {known}.") from None
