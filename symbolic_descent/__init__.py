# Python

"""Symbolic Descent Package

Symbolic expressions over x_0, x_1, ... with analytic gradients, driving
plain and normalized gradient descent and least-squares linear regression.
"""

from .errors import ExpressionError, ParseError, IndexOutOfRange, InvalidExponent
from .expression_tree import (
  Expression, Node, ConstantNode, VariableNode, AddNode, MulNode, PowNode,
  FormulaParser, parse_formula, CompiledExpression, SymPyBridge, ExpressionValidator
)
from .config import DescentConfig, DemoConfig, RegressionDemoConfig
from .optimizers import gradient_descent, normalized_gradient_descent, descent_history
from .regression import (
  linear_regression_cost, generate_plane_data, fitted_plane,
  regression_score, fit_linear_regression
)
from .logging_system import LogLevel, get_logger, set_log_level, configure_logging

__version__ = "0.1.0"
__all__ = [
  "ExpressionError", "ParseError", "IndexOutOfRange", "InvalidExponent",
  "Expression", "Node", "ConstantNode", "VariableNode", "AddNode", "MulNode", "PowNode",
  "FormulaParser", "parse_formula", "CompiledExpression", "SymPyBridge", "ExpressionValidator",
  "DescentConfig", "DemoConfig", "RegressionDemoConfig",
  "gradient_descent", "normalized_gradient_descent", "descent_history",
  "linear_regression_cost", "generate_plane_data", "fitted_plane",
  "regression_score", "fit_linear_regression",
  "LogLevel", "get_logger", "set_log_level", "configure_logging"
]
