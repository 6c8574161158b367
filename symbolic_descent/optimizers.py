"""
First-order optimizers driven by symbolic gradients.

Both drivers differentiate the objective once, then repeatedly evaluate the
gradient expressions at the current point. They run for exactly the
requested number of iterations: there is no convergence test, no early exit
and no divergence or NaN detection beyond a warning once the run is over.
"""

import numpy as np
from typing import Callable, List, Optional, Union

from tqdm import tqdm

from .config import DescentConfig
from .errors import IndexOutOfRange
from .expression_tree import Expression, Node, CompiledExpression
from .logging_system import log_milestone, log_descent_step, log_warning

Objective = Union[Expression, Node]
GradientEvaluator = Callable[[np.ndarray], float]


def _root(expression: Objective) -> Node:
    if isinstance(expression, Expression):
        return expression.root
    if isinstance(expression, Node):
        return expression
    raise TypeError(f"expected an Expression or Node, got {type(expression).__name__}")


def _prepare(expression: Objective, start, iterations: int,
             config: DescentConfig):
    """Copy of the start point plus one evaluator per gradient component"""
    root = _root(expression)
    if iterations < 0:
        raise ValueError(f"iterations must be non-negative, got {iterations}")

    current = np.array(start, dtype=np.float64)
    if current.ndim != 1:
        raise ValueError(f"start point must be one-dimensional, got shape {current.shape}")
    if current.shape[0] != root.arity:
        raise IndexOutOfRange(
            f"start point has {current.shape[0]} coordinates but the objective has arity {root.arity}",
            index=root.arity - 1, size=current.shape[0])

    gradient = root.gradient()
    if config.compiled:
        evaluators: List[GradientEvaluator] = [CompiledExpression(g).evaluate_unchecked for g in gradient]
    else:
        evaluators = [g.evaluate for g in gradient]
    return current, evaluators


def _gradient_values(evaluators: List[GradientEvaluator], current: np.ndarray) -> np.ndarray:
    # every component is evaluated at the same point before any coordinate moves
    return np.array([evaluate(current) for evaluate in evaluators], dtype=np.float64)


def _report_final_point(name: str, current: np.ndarray) -> None:
    if not np.all(np.isfinite(current)):
        log_warning(f"{name} ended at a non-finite point; alpha may be too large")
    log_milestone(f"{name} finished at {np.array2string(current, precision=6)}")


def _iteration_range(iterations: int, config: DescentConfig, desc: str):
    return tqdm(range(iterations), desc=desc, disable=not config.progress, leave=False)


def _should_log(config: DescentConfig, iteration: int) -> bool:
    return config.log_interval > 0 and iteration % config.log_interval == 0


def gradient_descent(expression: Objective, start, iterations: int, alpha: float,
                     config: Optional[DescentConfig] = None) -> np.ndarray:
    """
    Plain gradient descent: x <- x - alpha * grad f(x).

    Args:
        expression: objective f, an Expression or Node
        start: initial point, length must equal the objective's arity
        iterations: exact number of steps taken
        alpha: step size
        config: evaluation/progress options

    Returns:
        The final point as a new float64 array; `start` is left untouched.
    """
    config = config or DescentConfig()
    current, evaluators = _prepare(expression, start, iterations, config)
    log_milestone(f"gradient descent: {iterations} iterations, alpha={alpha}, {current.shape[0]} variables")

    for iteration in _iteration_range(iterations, config, "gradient descent"):
        gradient_values = _gradient_values(evaluators, current)
        current -= gradient_values * alpha
        if _should_log(config, iteration):
            log_descent_step("gd", iteration, float(np.linalg.norm(gradient_values)), alpha)

    _report_final_point("gradient descent", current)
    return current


def normalized_gradient_descent(expression: Objective, start, iterations: int, alpha: float,
                                eps: float, config: Optional[DescentConfig] = None) -> np.ndarray:
    """
    Normalized gradient descent: x <- x - alpha * grad f(x) / (|grad f(x)| + eps).

    Every step has length close to alpha regardless of how flat the objective
    is, which makes progress in valleys where the raw gradient vanishes.
    `eps` keeps the division finite at stationary points.
    """
    config = config or DescentConfig()
    current, evaluators = _prepare(expression, start, iterations, config)
    log_milestone(f"normalized gradient descent: {iterations} iterations, alpha={alpha}, eps={eps}")

    for iteration in _iteration_range(iterations, config, "normalized descent"):
        gradient_values = _gradient_values(evaluators, current)
        gradient_norm = np.sqrt(np.sum(gradient_values ** 2)) + eps
        current -= gradient_values / gradient_norm * alpha
        if _should_log(config, iteration):
            log_descent_step("ngd", iteration, float(gradient_norm - eps), alpha / gradient_norm)

    _report_final_point("normalized gradient descent", current)
    return current


def descent_history(expression: Objective, start, iterations: int, alpha: float,
                    config: Optional[DescentConfig] = None) -> List[np.ndarray]:
    """Points visited by plain gradient descent, start point first"""
    config = config or DescentConfig()
    current, evaluators = _prepare(expression, start, iterations, config)
    history = [current.copy()]
    for _ in _iteration_range(iterations, config, "gradient descent"):
        current -= _gradient_values(evaluators, current) * alpha
        history.append(current.copy())
    return history
