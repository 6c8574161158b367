"""
Logging System for Symbolic Descent

Centralized logging with verbosity levels, so optimizer runs can report
milestones and periodic progress without flooding the terminal.
"""

import logging
import sys
from typing import Optional, Dict, Any
from enum import Enum
import time
from datetime import datetime


class LogLevel(Enum):
    """Enumeration of logging levels"""
    SILENT = 0      # No output
    MINIMAL = 1     # Only final results and critical info
    MODERATE = 2    # Progress updates and key milestones
    DETAILED = 3    # Per-run details (step sizes, gradient norms)
    VERBOSE = 4     # All information including parser debug output


class DescentLogger:
    """
    Centralized logger for expression building and optimization runs
    """

    def __init__(self, log_level: LogLevel = LogLevel.MINIMAL,
                 log_to_file: bool = False, log_file_path: Optional[str] = None):
        self.log_level = log_level
        self.log_to_file = log_to_file
        self.start_time = time.time()

        self.logger = logging.getLogger('symbolic_descent')
        self.logger.setLevel(logging.DEBUG)
        self.logger.handlers.clear()
        self.logger.propagate = False

        formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        )

        if self.log_level != LogLevel.SILENT:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

        if log_to_file:
            if log_file_path is None:
                log_file_path = f"symbolic_descent_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
            file_handler = logging.FileHandler(log_file_path)
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

    def _should_log(self, required_level: LogLevel) -> bool:
        """Check if message should be logged based on current log level"""
        return self.log_level.value >= required_level.value

    def info(self, message: str, required_level: LogLevel = LogLevel.MINIMAL):
        """General information with configurable level"""
        if self._should_log(required_level):
            self.logger.info(message)

    def descent_step(self, method: str, iteration: int, gradient_norm: float, step_size: float):
        """Log one optimizer iteration"""
        if not self._should_log(LogLevel.DETAILED):
            return

        elapsed = time.time() - self.start_time
        self.logger.info(f"{method} it {iteration:6d}: |grad|={gradient_norm:.6e} "
                         f"step={step_size:.6e} ({elapsed:.1f}s)")

    def milestone(self, message: str):
        """Important milestones - shown from moderate level onwards"""
        if self._should_log(LogLevel.MODERATE):
            self.logger.info(f"MILESTONE: {message}")

    def warning(self, message: str):
        """Warnings - shown from minimal level onwards"""
        if self._should_log(LogLevel.MINIMAL):
            self.logger.warning(message)

    def debug(self, message: str):
        """Debug information - only in verbose mode"""
        if self._should_log(LogLevel.VERBOSE):
            self.logger.debug(f"DEBUG: {message}")

    def result_summary(self, title: str, results: Dict[str, Any]):
        """Log a block of named results"""
        if not self._should_log(LogLevel.MINIMAL):
            return

        self.logger.info("=" * 60)
        self.logger.info(title)
        self.logger.info("=" * 60)

        for key, value in results.items():
            if isinstance(value, float):
                self.logger.info(f"{key:.<30} {value:.6f}")
            else:
                self.logger.info(f"{key:.<30} {value}")


# Global logger instance
_global_logger: Optional[DescentLogger] = None


def get_logger() -> DescentLogger:
    """Get or create the global logger instance"""
    global _global_logger
    if _global_logger is None:
        _global_logger = DescentLogger()
    return _global_logger


def set_log_level(level: LogLevel):
    """Set the global logging level"""
    global _global_logger
    if _global_logger is None:
        _global_logger = DescentLogger(log_level=level)
    else:
        _global_logger.log_level = level


def configure_logging(log_level: LogLevel = LogLevel.MINIMAL,
                      log_to_file: bool = False,
                      log_file_path: Optional[str] = None) -> DescentLogger:
    """Configure the global logging system"""
    global _global_logger
    _global_logger = DescentLogger(
        log_level=log_level,
        log_to_file=log_to_file,
        log_file_path=log_file_path
    )
    return _global_logger


# Convenience functions for common operations
def log_info(message: str, level: LogLevel = LogLevel.MINIMAL):
    """Log info message at specified level"""
    get_logger().info(message, level)


def log_milestone(message: str):
    """Log milestone message"""
    get_logger().milestone(message)


def log_warning(message: str):
    """Log warning message"""
    get_logger().warning(message)


def log_descent_step(method: str, iteration: int, gradient_norm: float, step_size: float):
    """Log optimizer iteration"""
    get_logger().descent_step(method, iteration, gradient_norm, step_size)


def log_debug(message: str):
    """Log debug message"""
    get_logger().debug(message)
