"""Demo runner: solves dy/dx = x + y with all three integrators."""
import logging

from odesolver.analysis import get_reference_problem, summarize
from odesolver.config import DEFAULT_H, DEFAULT_N, DEFAULT_X0, DEFAULT_Y0
from odesolver.logging_config import setup_logging
from odesolver.model import StepConfig
from odesolver.solvers import IntegratorKind

logger = logging.getLogger("odesolver.demo")


def main() -> None:
    setup_logging(level=logging.INFO)

    problem = get_reference_problem("x + y")
    config = StepConfig(x0=DEFAULT_X0, y0=DEFAULT_Y0, h=DEFAULT_H, n=DEFAULT_N)
    logger.info(f"dy/dx = {problem.equation.formula}, exact y = {problem.exact.formula}")

    for kind in IntegratorKind:
        trajectory = problem.solve(kind, config)
        rows = problem.compare(trajectory)

        logger.info(f"--- {kind.value} ---")
        logger.info(f"{'Iteration':>9} {'x':>8} {'Exact':>12} {'Approximate':>12} {'Error (%)':>10}")
        for row in rows:
            error = f"{row.error_percentage:.4f}" if row.error_defined else "n/a"
            logger.info(f"{row.iteration:>9} {row.x:>8.4f} {row.exact:>12.4f} {row.approximate:>12.4f} {error:>10}")

        summary = summarize(rows)
        logger.info(f"Max error: {summary.max_error_percentage:.4f} %, mean error: {summary.mean_error_percentage:.4f} %")


if __name__ == "__main__":
    main()
