"""Infix formula parser.

Grammar (whitespace is ignored):

    expr      := bracketed | addChain
    addChain  := mulChain ('+' mulChain)*
    mulChain  := powTerm ('*' powTerm)*
    powTerm   := atom ('^' number)?
    atom      := bracketed | variable | number
    bracketed := '(' expr ')'
    variable  := 'x_' digits

There is no unary minus: negative values are written as negative literals,
e.g. ``x_1 + (-2)``. A sub-formula is split at its lowest-precedence
operators outside brackets, so chains come out left-associative:
``a + b + c`` parses as ``(a + b) + c``.
"""

import re
from typing import Dict, List

from .core.node import Node, ConstantNode, VariableNode, AddNode, MulNode, PowNode
from .expression import Expression
from ..errors import ParseError
from ..logging_system import log_debug

VARIABLE_PATTERN = re.compile(r'x_(\d+)')
NUMBER_PATTERN = re.compile(r'-?(?:\d+\.?\d*|\.\d+)(?:[eE]-?\d+)?|-?(?:inf|nan)', re.IGNORECASE)

# lowest precedence first
OPERATORS = ('+', '*', '^')


class FormulaParser:
  """Parses one formula; positions in errors refer to the text as given"""

  def __init__(self, text: str):
    if not isinstance(text, str):
      raise TypeError(f"formula must be a string, got {type(text).__name__}")
    self.text = text
    self._positions: List[int] = [i for i, char in enumerate(text) if not char.isspace()]
    self._compact = ''.join(text[i] for i in self._positions)
    self._closing: Dict[int, int] = {}

  def parse(self) -> Node:
    self._match_brackets()
    root = self._parse(0, len(self._compact))
    log_debug(f"parsed {self.text!r}: {type(root).__name__}, arity {root.arity}")
    return root

  def _match_brackets(self):
    open_stack = []
    for i, char in enumerate(self._compact):
      if char == '(':
        open_stack.append(i)
      elif char == ')':
        if not open_stack:
          raise ParseError("unmatched closing bracket", self._positions[i], ')')
        self._closing[open_stack.pop()] = i
    if open_stack:
      start = open_stack[-1]
      raise ParseError("unclosed bracket", self._positions[start], self._fragment(start, len(self._compact)))

  def _strip_brackets(self, start: int, end: int):
    while end - start >= 2 and self._compact[start] == '(' and self._closing.get(start) == end - 1:
      start += 1
      end -= 1
    return start, end

  def _split_points(self, start: int, end: int) -> Dict[str, List[int]]:
    """Positions of operators at bracket depth zero, per operator"""
    splits: Dict[str, List[int]] = {op: [] for op in OPERATORS}
    depth = 0
    for i in range(start, end):
      char = self._compact[i]
      if char == '(':
        depth += 1
      elif char == ')':
        depth -= 1
      elif depth == 0 and char in splits:
        splits[char].append(i)
    return splits

  def _segments(self, start: int, end: int, cuts: List[int]):
    bounds = [start - 1] + cuts + [end]
    return [(bounds[k] + 1, bounds[k + 1]) for k in range(len(bounds) - 1)]

  def _parse(self, start: int, end: int) -> Node:
    start, end = self._strip_brackets(start, end)
    if start >= end:
      raise ParseError("empty expression", self._position(start), self._fragment(start - 1, end + 1))

    splits = self._split_points(start, end)

    # Folding over every cut gives the same tree as repeatedly splitting at
    # the last one, without recursing once per operand.
    if splits['+']:
      segments = self._segments(start, end, splits['+'])
      node = self._parse(*segments[0])
      for segment in segments[1:]:
        node = AddNode(node, self._parse(*segment))
      return node

    if splits['*']:
      segments = self._segments(start, end, splits['*'])
      node = self._parse(*segments[0])
      for segment in segments[1:]:
        node = MulNode(node, self._parse(*segment))
      return node

    if splits['^']:
      segments = self._segments(start, end, splits['^'])
      node = self._parse(*segments[0])
      for segment in segments[1:]:
        node = PowNode(node, self._parse_exponent(*segment))
      return node

    return self._parse_atom(start, end)

  def _parse_exponent(self, start: int, end: int) -> float:
    start, end = self._strip_brackets(start, end)
    token = self._compact[start:end]
    if not token:
      raise ParseError("missing exponent", self._position(start), self._fragment(start - 1, end))
    if not NUMBER_PATTERN.fullmatch(token):
      raise ParseError("exponent must be a numeric literal", self._position(start), self._fragment(start, end))
    return float(token)

  def _parse_atom(self, start: int, end: int) -> Node:
    token = self._compact[start:end]
    match = VARIABLE_PATTERN.fullmatch(token)
    if match:
      return VariableNode(int(match.group(1)))
    if NUMBER_PATTERN.fullmatch(token):
      return ConstantNode(float(token))
    if token.startswith('x_'):
      raise ParseError("invalid variable name", self._position(start), self._fragment(start, end))
    raise ParseError("unrecognized token", self._position(start), self._fragment(start, end))

  def _position(self, index: int) -> int:
    if index < len(self._positions):
      return self._positions[index]
    return len(self.text)

  def _fragment(self, start: int, end: int) -> str:
    start = max(start, 0)
    end = min(end, len(self._compact))
    if start >= end:
      return ""
    return self.text[self._positions[start]:self._positions[end - 1] + 1]


def parse_formula(text: str) -> Expression:
  """Parse an infix formula such as ``x_0^2 + (x_1+(-2))^4``"""
  return Expression(FormulaParser(text).parse())
