import numpy as np
from typing import Optional, List
from .core.node import Node, PointLike
import sympy as sp
from .utils.compiler import CompiledExpression
from .utils.tree_utils import calculate_tree_depth, get_variables, get_constants


class Expression:
  """Expression facade over an immutable node tree"""

  __slots__ = ('root', '_string_cache')

  def __init__(self, root: Node):
    if not isinstance(root, Node):
      raise TypeError(f"Expression root must be a Node, got {type(root).__name__}")
    self.root = root
    self._string_cache: Optional[str] = None

  @property
  def arity(self) -> int:
    """Number of variable slots, 1 + the highest variable index (0 if none)"""
    return self.root.arity

  def evaluate(self, point: PointLike) -> float:
    return self.root.evaluate(point)

  def evaluate_batch(self, X: np.ndarray) -> np.ndarray:
    return self.root.evaluate_batch(X)

  def derivative(self, with_respect_to: int) -> 'Expression':
    return Expression(self.root.derivative(with_respect_to))

  def gradient(self) -> List['Expression']:
    return [Expression(node) for node in self.root.gradient()]

  def simplify(self) -> 'Expression':
    """One-level rewrite of the root node"""
    node = self.root.simplify()
    return self if node is self.root else Expression(node)

  def simplify_deep(self) -> 'Expression':
    """Bottom-up simplification of every node, for hand-built trees"""
    node = self.root.simplify_deep()
    return self if node is self.root else Expression(node)

  def compile(self) -> CompiledExpression:
    return CompiledExpression(self.root)

  def compile_gradient(self) -> List[CompiledExpression]:
    return [CompiledExpression(node) for node in self.root.gradient()]

  def to_string(self) -> str:
    if self._string_cache is None:
      self._string_cache = self.root.to_string()
    return self._string_cache

  def to_sympy(self) -> sp.Expr:
    return self.root.to_sympy()

  def size(self) -> int:
    """Node count"""
    return self.root.size()

  def depth(self) -> int:
    return calculate_tree_depth(self.root)

  def variables(self) -> List[int]:
    return get_variables(self.root)

  def constants(self) -> tuple:
    return tuple(get_constants(self.root))

  def __str__(self) -> str:
    return self.to_string()

  def __repr__(self) -> str:
    return f"Expression({self.to_string()!r})"

  def __hash__(self) -> int:
    return hash(self.root)

  def __eq__(self, other) -> bool:
    if not isinstance(other, Expression):
      return False
    return self.root == other.root

  @classmethod
  def from_string(cls, expr_str: str) -> 'Expression':
    from .parser import FormulaParser
    return cls(FormulaParser(expr_str).parse())
