"""
Demonstration script.

Prints a hand-built and a parsed expression with their gradients, minimizes
the parsed one with both descent variants, then fits noiseless and noisy
data around the plane y = 3 x_0 + 2 x_1 - 2.
"""

import argparse
import sys
from typing import List, Optional, Sequence

import numpy as np

from .config import DemoConfig, RegressionDemoConfig
from .errors import ExpressionError
from .expression_tree import Expression, ConstantNode, VariableNode, AddNode, MulNode, parse_formula
from .logging_system import LogLevel, configure_logging
from .optimizers import gradient_descent, normalized_gradient_descent
from .regression import generate_plane_data, fit_linear_regression, regression_score


def vector_to_string(items: Sequence) -> str:
  return "[" + ", ".join(str(item) for item in items) + "]"


def format_point(point: np.ndarray) -> str:
  return "[" + ", ".join(f"{value:f}" for value in point) + "]"


def show_expression(expression: Expression, out) -> None:
  print(expression.to_string(), file=out)
  print(vector_to_string(expression.gradient()), file=out)


def run_regression(settings: RegressionDemoConfig, config: DemoConfig, out) -> None:
  low, high = settings.feature_range
  rng = np.random.default_rng(settings.seed)
  X, y_exact = generate_plane_data(settings.n_samples, settings.coefficients,
                                   settings.intercept, low=low, high=high, rng=rng)
  y_noisy = y_exact + rng.uniform(-settings.noise / 2, settings.noise / 2, size=y_exact.shape[0])

  expected = [settings.intercept] + list(settings.coefficients)
  for label, y in (("exact", y_exact), ("noisy", y_noisy)):
    weights, final_cost = fit_linear_regression(X, y, settings.iterations, settings.alpha,
                                                config=config.descent)
    print(f"{label} data: final cost {final_cost:f}, R^2 {regression_score(weights, X, y):f}", file=out)
    print(f"{format_point(weights)} (expected about {format_point(np.asarray(expected))})", file=out)


def run_demo(config: DemoConfig, formula: Optional[str] = None, out=None) -> None:
  out = out or sys.stdout

  # 2 + 3*x_1
  show_expression(Expression(AddNode(ConstantNode(2), MulNode(ConstantNode(3), VariableNode(1)))), out)

  expression = parse_formula(formula or config.formula)
  show_expression(expression, out)

  start = np.zeros(expression.arity)
  n_given = min(len(config.start), expression.arity)
  start[:n_given] = config.start[:n_given]
  normalized = normalized_gradient_descent(expression, start, config.normalized_iterations,
                                           config.normalized_alpha, config.normalized_eps, config.descent)
  plain = gradient_descent(expression, start, config.plain_iterations, config.plain_alpha, config.descent)
  print(format_point(normalized), file=out)
  print(format_point(plain), file=out)

  run_regression(config.regression, config, out)


def build_arg_parser() -> argparse.ArgumentParser:
  parser = argparse.ArgumentParser(
    prog="symbolic-descent",
    description="Differentiate a formula symbolically and minimize it by gradient descent.")
  parser.add_argument("formula", nargs="?", default=None,
                      help=f"formula over x_0, x_1, ... (default: {DemoConfig.formula!r})")
  parser.add_argument("--samples", type=int, default=RegressionDemoConfig.n_samples,
                      help="regression samples per dataset")
  parser.add_argument("--iterations", type=int, default=RegressionDemoConfig.iterations,
                      help="gradient descent iterations for the regression fits")
  parser.add_argument("--seed", type=int, default=RegressionDemoConfig.seed)
  parser.add_argument("--log-level", choices=[level.name for level in LogLevel], default="MINIMAL")
  parser.add_argument("--progress", action="store_true", help="show tqdm progress bars")
  return parser


def main(argv: Optional[List[str]] = None) -> int:
  args = build_arg_parser().parse_args(argv)
  configure_logging(LogLevel[args.log_level])

  config = DemoConfig()
  config.regression.n_samples = args.samples
  config.regression.iterations = args.iterations
  config.regression.seed = args.seed
  config.descent.progress = args.progress

  try:
    run_demo(config, args.formula)
  except ExpressionError as exc:
    print(f"error: {exc}", file=sys.stderr)
    return 1
  return 0


if __name__ == "__main__":
  sys.exit(main())
