"""
Run configuration for the optimizers and the demonstration script.

Plain dataclasses with defaults; nothing is read from files or the
environment.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple


@dataclass
class DescentConfig:
    compiled: bool = True      # evaluate gradients through the numba tape instead of the tree
    progress: bool = False     # tqdm progress bar over iterations
    log_interval: int = 0      # log |grad| every n iterations, 0 disables

    def __post_init__(self):
        if self.log_interval < 0:
            raise ValueError("log_interval must be a non-negative integer")


@dataclass
class RegressionDemoConfig:
    n_samples: int = 1000
    coefficients: Tuple[float, ...] = (3.0, 2.0)
    intercept: float = -2.0
    noise: float = 1.0                 # width of the uniform noise band
    feature_range: Tuple[float, float] = (0.0, 10.0)
    iterations: int = 10000
    alpha: float = 0.01
    seed: int = 0


@dataclass
class DemoConfig:
    formula: str = "x_0^2 + (x_1+(-2))^4"
    start: Tuple[float, ...] = (2.0, 3.0)
    normalized_iterations: int = 10000
    normalized_alpha: float = 1.0
    normalized_eps: float = 1e-6
    plain_iterations: int = 1000
    plain_alpha: float = 0.01
    regression: RegressionDemoConfig = field(default_factory=RegressionDemoConfig)
    descent: DescentConfig = field(default_factory=DescentConfig)
