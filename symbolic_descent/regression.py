"""
Least-squares linear regression expressed as a symbolic cost.

The cost over weights w_0 .. w_d (w_0 is the intercept) is

    (1/N) * sum_i (w_0 + sum_j w_j * x_ij - y_i)^2

built as a single expression so that either optimizer can minimize it
through its symbolic gradient.
"""

import numpy as np
from typing import List, Optional, Sequence, Tuple, Union

from sklearn.metrics import r2_score

from .config import DescentConfig
from .expression_tree import Expression, Node, ConstantNode, VariableNode, AddNode, MulNode, PowNode
from .optimizers import gradient_descent
from .logging_system import get_logger, log_info, LogLevel

RandomSource = Union[None, int, np.random.Generator]


def _as_regression_data(x_vals, y_vals) -> Tuple[np.ndarray, np.ndarray]:
    y = np.asarray(y_vals, dtype=np.float64)
    if y.ndim != 1 or y.shape[0] == 0:
        raise ValueError(f"y_vals must be a non-empty 1-D sequence, got shape {y.shape}")
    try:
        X = np.asarray(x_vals, dtype=np.float64)
    except ValueError as exc:
        raise ValueError("x_vals must be a rectangular matrix of feature rows") from exc
    if X.ndim != 2 or X.shape[0] != y.shape[0]:
        raise ValueError(f"x_vals must have shape ({y.shape[0]}, n_features), got {X.shape}")
    return X, y


def _balanced_sum(terms: List[Node]) -> Node:
    """Sum of `terms` as a tree of depth ~log2(len(terms))"""
    level = list(terms)
    while len(level) > 1:
        paired = [AddNode(level[k], level[k + 1]) for k in range(0, len(level) - 1, 2)]
        if len(level) % 2:
            paired.append(level[-1])
        level = paired
    return level[0]


def linear_regression_cost(x_vals, y_vals) -> Expression:
    """
    Mean squared error of a linear model as an expression over its weights.

    Args:
        x_vals: feature matrix, one row per sample, shape (N, d)
        y_vals: targets, length N

    Returns:
        Expression of arity d + 1; Var(0) is the intercept, Var(j + 1) the
        weight of feature j.
    """
    X, y = _as_regression_data(x_vals, y_vals)
    n_samples, n_features = X.shape
    weights = [VariableNode(k) for k in range(n_features + 1)]

    squared_residuals = []
    for i in range(n_samples):
        # (w_0 + w_1 * x_i1 + ... + w_d * x_id + (-y_i))^2
        term: Node = weights[0]
        for j in range(n_features):
            term = AddNode(term, MulNode(weights[j + 1], ConstantNode(X[i, j])))
        term = AddNode(term, ConstantNode(-y[i]))
        squared_residuals.append(PowNode(term, 2))

    cost = MulNode(ConstantNode(1.0 / n_samples), _balanced_sum(squared_residuals))
    log_info(f"built regression cost over {n_samples} samples, {n_features + 1} weights",
             LogLevel.DETAILED)
    return Expression(cost)


def generate_plane_data(n_samples: int, coefficients: Sequence[float], intercept: float,
                        noise: float = 0.0, low: float = 0.0, high: float = 10.0,
                        rng: RandomSource = None) -> Tuple[np.ndarray, np.ndarray]:
    """
    Samples around the plane y = intercept + coefficients . x.

    Features are uniform in [low, high); `noise` is the width of a uniform
    band centred on the plane (0 puts every target exactly on it).
    """
    if n_samples <= 0:
        raise ValueError("n_samples must be a positive integer")
    rng = np.random.default_rng(rng)
    coefficients = np.asarray(coefficients, dtype=np.float64)
    X = rng.uniform(low, high, size=(n_samples, coefficients.shape[0]))
    y = X @ coefficients + intercept
    if noise:
        y = y + rng.uniform(-noise / 2, noise / 2, size=n_samples)
    return X, y


def fitted_plane(weights: Sequence[float]) -> Expression:
    """The fitted model w_0 + sum_j w_j * x_j as an expression over the features"""
    weights = np.asarray(weights, dtype=np.float64)
    if weights.ndim != 1 or weights.shape[0] == 0:
        raise ValueError("weights must hold at least the intercept")
    node: Node = ConstantNode(weights[0])
    for j in range(1, weights.shape[0]):
        node = AddNode(node, MulNode(ConstantNode(weights[j]), VariableNode(j - 1)))
    return Expression(node)


def regression_score(weights: Sequence[float], x_vals, y_vals) -> float:
    """Coefficient of determination of the fitted plane on (x_vals, y_vals)"""
    X, y = _as_regression_data(x_vals, y_vals)
    predictions = fitted_plane(weights).evaluate_batch(X)
    return float(r2_score(y, predictions))


def fit_linear_regression(x_vals, y_vals, iterations: int, alpha: float,
                          start: Optional[Sequence[float]] = None,
                          config: Optional[DescentConfig] = None) -> Tuple[np.ndarray, float]:
    """Minimize the regression cost with plain gradient descent.

    Returns the weights and the final cost.
    """
    cost = linear_regression_cost(x_vals, y_vals)
    if start is None:
        start = np.zeros(cost.arity)
    weights = gradient_descent(cost, start, iterations, alpha, config)
    final_cost = cost.evaluate(weights)
    get_logger().result_summary("Linear regression fit", {
        "samples": len(y_vals),
        "iterations": iterations,
        "final cost": final_cost,
        "weights": np.array2string(weights, precision=6),
    })
    return weights, final_cost
