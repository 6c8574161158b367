import numpy as np
from typing import Optional
from scipy.optimize import approx_fprime

from ..core.node import Node, PointLike, as_point_array


class ExpressionValidator:

  @staticmethod
  def validate_point(node: Node, point: PointLike) -> np.ndarray:
    """float64 copy of `point`; IndexOutOfRange if it is shorter than the arity"""
    return as_point_array(point, node.arity).copy()

  @staticmethod
  def numeric_gradient(node: Node, point: PointLike, epsilon: float = 1e-6) -> np.ndarray:
    """Central finite differences of `node` at `point`"""
    values = ExpressionValidator.validate_point(node, point)
    result = np.empty(node.arity, dtype=np.float64)
    for i in range(node.arity):
      step = np.zeros_like(values)
      step[i] = epsilon
      result[i] = (node.evaluate(values + step) - node.evaluate(values - step)) / (2 * epsilon)
    return result

  @staticmethod
  def check_gradient(node: Node, point: PointLike, epsilon: Optional[float] = None) -> float:
    """
    Largest absolute difference between the symbolic gradient and a
    forward-difference estimate (scipy.optimize.approx_fprime) at `point`.
    numeric_gradient gives the central difference instead.
    """
    values = ExpressionValidator.validate_point(node, point)[:node.arity]
    if node.arity == 0:
      return 0.0
    if epsilon is None:
      epsilon = np.sqrt(np.finfo(float).eps)
    symbolic = np.array([d.evaluate(values) for d in node.gradient()])
    numeric = approx_fprime(values, node.evaluate, epsilon)
    return float(np.max(np.abs(symbolic - numeric)))
