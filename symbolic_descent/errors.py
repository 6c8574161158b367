"""Error types raised by expression construction, parsing and evaluation."""

from typing import Optional


class ExpressionError(Exception):
  """Base class for all symbolic_descent errors"""


class ParseError(ExpressionError, ValueError):
  """Malformed formula text.

  `position` is the index of the offending character in the text that was
  handed to the parser (whitespace included), `fragment` the substring that
  could not be parsed.
  """

  def __init__(self, message: str, position: int, fragment: str = ""):
    self.message = message
    self.position = position
    self.fragment = fragment
    detail = f"{message} at position {position}"
    if fragment:
      detail += f": {fragment!r}"
    super().__init__(detail)


class IndexOutOfRange(ExpressionError, IndexError):
  """A variable index or evaluation point that does not fit the expression"""

  def __init__(self, message: str, index: Optional[int] = None, size: Optional[int] = None):
    self.message = message
    self.index = index
    self.size = size
    super().__init__(message)


class InvalidExponent(ExpressionError, TypeError):
  """Power nodes only accept real number literals as exponents"""

  def __init__(self, exponent):
    self.exponent = exponent
    super().__init__(f"exponent must be a numeric literal, got {type(exponent).__name__}: {exponent!r}")
