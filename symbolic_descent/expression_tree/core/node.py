import numbers

import numpy as np
import sympy as sp
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, List, Sequence, Tuple, Union
from .operators import (
  NodeType, power,
  evaluate_variable, evaluate_constant, evaluate_add, evaluate_mul, evaluate_pow
)
from ...errors import IndexOutOfRange, InvalidExponent

PointLike = Union[Sequence[float], np.ndarray]


def format_number(value: float) -> str:
  """Shortest float repr that the formula parser reads back unchanged"""
  text = repr(float(value))
  # '1e+20' would be split at the '+' by the parser
  return text.replace('e+', 'e')


def sympy_number(value: float) -> sp.Expr:
  value = float(value)
  if value.is_integer():
    return sp.Integer(int(value))
  return sp.Float(value)


def as_point_array(point: PointLike, arity: int) -> np.ndarray:
  values = np.asarray(point, dtype=np.float64)
  if values.ndim != 1:
    raise ValueError(f"evaluation point must be one-dimensional, got shape {values.shape}")
  if values.shape[0] < arity:
    raise IndexOutOfRange(
      f"evaluation point has {values.shape[0]} coordinates but the expression uses {arity}",
      index=arity - 1, size=values.shape[0])
  return values


def as_point(point: PointLike, arity: int) -> List[float]:
  return as_point_array(point, arity).tolist()


def as_samples(X: np.ndarray, arity: int) -> np.ndarray:
  samples = np.ascontiguousarray(X, dtype=np.float64)
  if samples.ndim != 2:
    raise ValueError(f"samples must be a 2-D array (n_samples, n_vars), got shape {samples.shape}")
  if samples.shape[1] < arity:
    raise IndexOutOfRange(
      f"samples have {samples.shape[1]} columns but the expression uses {arity}",
      index=arity - 1, size=samples.shape[1])
  return samples


def check_variable_index(index, what: str = "variable index") -> int:
  if isinstance(index, bool) or not isinstance(index, numbers.Integral):
    raise IndexOutOfRange(f"{what} must be an integer, got {index!r}")
  if index < 0:
    raise IndexOutOfRange(f"{what} must be non-negative, got {index}", index=int(index))
  return int(index)


def fold_tree(root: 'Node', visit: Callable[['Node', List[Any]], Any]) -> Any:
  """Post-order reduction of `root` with an explicit stack.

  `visit(node, child_results)` runs once per distinct node object, so a
  shared subtree is reduced once and left-deep chains of any length stay
  clear of the recursion limit.
  """
  results: Dict[int, Any] = {}
  stack = [root]
  while stack:
    node = stack[-1]
    if id(node) in results:
      stack.pop()
      continue
    children = node.children()
    pending = [child for child in children if id(child) not in results]
    if pending:
      stack.extend(pending)
      continue
    stack.pop()
    results[id(node)] = visit(node, [results[id(child)] for child in children])
  return results[id(root)]


class Node(ABC):
  """Immutable expression tree node.

  Subclasses set their fields once in __init__ through _freeze; afterwards
  every transformation builds new nodes, so subtrees can be shared freely.
  Hash and size are derived from the children's stored values, never by
  walking the tree again.
  """

  __slots__ = ('arity', '_hash', '_size')

  node_type: NodeType

  def _freeze(self, arity: int, **fields):
    for name, value in fields.items():
      object.__setattr__(self, name, value)
    children = self.children()
    object.__setattr__(self, 'arity', arity)
    object.__setattr__(self, '_size', 1 + sum(child._size for child in children))
    object.__setattr__(self, '_hash', hash(
      (self.node_type,) + self._fields() + tuple(child._hash for child in children)))

  def __setattr__(self, name, value):
    raise AttributeError(f"{type(self).__name__} is immutable")

  def __delattr__(self, name):
    raise AttributeError(f"{type(self).__name__} is immutable")

  def evaluate(self, point: PointLike) -> float:
    """Value at `point`; the point needs at least `arity` coordinates."""
    values = as_point(point, self.arity)
    return float(fold_tree(self, lambda node, args: node._evaluate(values, args)))

  def evaluate_batch(self, X: np.ndarray) -> np.ndarray:
    """Value at every row of X, shape (n_samples, n_vars)."""
    samples = as_samples(X, self.arity)
    return fold_tree(self, lambda node, args: node._evaluate_batch(samples, args))

  def derivative(self, with_respect_to: int) -> 'Node':
    """Symbolic partial derivative, simplified one level at each step."""
    return self._differentiate(check_variable_index(with_respect_to))

  def gradient(self) -> List['Node']:
    return [self._differentiate(i) for i in range(self.arity)]

  def _differentiate(self, index: int) -> 'Node':
    return fold_tree(self, lambda node, args: node._derivative(index, args))

  def simplify_deep(self) -> 'Node':
    """Bottom-up simplify of every node, for hand-built trees"""
    return fold_tree(self, lambda node, args: node._rebuild(args).simplify())

  def to_string(self) -> str:
    return fold_tree(self, lambda node, args: node._format(args))

  def to_sympy(self) -> sp.Expr:
    return fold_tree(self, lambda node, args: node._to_sympy(args))

  # args below are the results already computed for children(), in order

  @abstractmethod
  def _evaluate(self, point: List[float], args: List[float]) -> float:
    pass

  @abstractmethod
  def _evaluate_batch(self, X: np.ndarray, args: List[np.ndarray]) -> np.ndarray:
    pass

  @abstractmethod
  def _derivative(self, index: int, args: List['Node']) -> 'Node':
    pass

  @abstractmethod
  def simplify(self) -> 'Node':
    pass

  @abstractmethod
  def _format(self, args: List[str]) -> str:
    pass

  @abstractmethod
  def _to_sympy(self, args: List[sp.Expr]) -> sp.Expr:
    pass

  @abstractmethod
  def children(self) -> Tuple['Node', ...]:
    pass

  @abstractmethod
  def _fields(self) -> tuple:
    """Non-node data that takes part in equality"""

  def _rebuild(self, children: List['Node']) -> 'Node':
    return self

  def _repr(self, args: List[str]) -> str:
    return f"{type(self).__name__}({', '.join(args + [repr(f) for f in self._fields()])})"

  def size(self) -> int:
    """Node count"""
    return self._size

  def __str__(self) -> str:
    return self.to_string()

  def __repr__(self) -> str:
    return fold_tree(self, lambda node, args: node._repr(args))

  def __eq__(self, other) -> bool:
    if self is other:
      return True
    if not isinstance(other, Node):
      return NotImplemented
    pairs = [(self, other)]
    while pairs:
      a, b = pairs.pop()
      if a is b:
        continue
      if type(a) is not type(b) or a._hash != b._hash or a._fields() != b._fields():
        return False
      pairs.extend(zip(a.children(), b.children()))
    return True

  def __hash__(self) -> int:
    return self._hash


class ConstantNode(Node):
  __slots__ = ('value',)

  node_type = NodeType.CONSTANT

  def __init__(self, value: float):
    self._freeze(0, value=float(value))

  def _evaluate(self, point, args):
    return self.value

  def _evaluate_batch(self, X, args):
    return evaluate_constant(X.shape[0], self.value)

  def _derivative(self, index, args):
    return ConstantNode(0.0)

  def simplify(self):
    return self

  def _format(self, args):
    text = format_number(self.value)
    if text.startswith('-'):
      return f"({text})"
    return text

  def _to_sympy(self, args):
    return sympy_number(self.value)

  def children(self):
    return ()

  def _fields(self):
    return (self.value,)


class VariableNode(Node):
  __slots__ = ('index',)

  node_type = NodeType.VARIABLE

  def __init__(self, index: int):
    index = check_variable_index(index)
    self._freeze(index + 1, index=index)

  def _evaluate(self, point, args):
    return point[self.index]

  def _evaluate_batch(self, X, args):
    return evaluate_variable(X, self.index)

  def _derivative(self, index, args):
    if index == self.index:
      return ConstantNode(1.0)
    return ConstantNode(0.0)

  def simplify(self):
    return self

  def _format(self, args):
    return f"x_{self.index}"

  def _to_sympy(self, args):
    return sp.Symbol(f'x_{self.index}', real=True)

  def children(self):
    return ()

  def _fields(self):
    return (self.index,)


def _constant_value(node: Node) -> Optional[float]:
  if isinstance(node, ConstantNode):
    return node.value
  return None


class BinaryNode(Node):
  __slots__ = ('left', 'right')

  def __init__(self, left: Node, right: Node):
    if not isinstance(left, Node) or not isinstance(right, Node):
      raise TypeError(f"{type(self).__name__} operands must be nodes, got "
                      f"{type(left).__name__} and {type(right).__name__}")
    self._freeze(max(left.arity, right.arity), left=left, right=right)

  def _rebuild(self, children):
    left, right = children
    if left is self.left and right is self.right:
      return self
    return type(self)(left, right)

  def children(self):
    return (self.left, self.right)

  def _fields(self):
    return ()


class AddNode(BinaryNode):
  __slots__ = ()

  node_type = NodeType.ADD

  def _evaluate(self, point, args):
    return args[0] + args[1]

  def _evaluate_batch(self, X, args):
    return evaluate_add(args[0], args[1])

  def _derivative(self, index, args):
    return AddNode(args[0], args[1]).simplify()

  def simplify(self):
    a = _constant_value(self.left)
    b = _constant_value(self.right)
    if a == 0:
      return self.right
    if b == 0:
      return self.left
    if a is not None and b is not None:
      return ConstantNode(a + b)
    return self

  def _format(self, args):
    return f"{args[0]} + {args[1]}"

  def _to_sympy(self, args):
    return sp.Add(args[0], args[1])


class MulNode(BinaryNode):
  __slots__ = ()

  node_type = NodeType.MUL

  def _evaluate(self, point, args):
    return args[0] * args[1]

  def _evaluate_batch(self, X, args):
    return evaluate_mul(args[0], args[1])

  # product rule
  def _derivative(self, index, args):
    d_left, d_right = args
    return AddNode(
      MulNode(d_left, self.right).simplify(),
      MulNode(self.left, d_right).simplify()
    ).simplify()

  def simplify(self):
    a = _constant_value(self.left)
    b = _constant_value(self.right)
    if a == 0 or b == 0:
      return ConstantNode(0.0)
    if a == 1:
      return self.right
    if b == 1:
      return self.left
    if a is not None and b is not None:
      return ConstantNode(a * b)
    return self

  def _format(self, args):
    left, right = args
    if isinstance(self.left, AddNode):
      left = f"({left})"
    if isinstance(self.right, AddNode):
      right = f"({right})"
    return f"{left}*{right}"

  def _to_sympy(self, args):
    return sp.Mul(args[0], args[1])


class PowNode(Node):
  """base ^ exponent where the exponent is a fixed real literal"""

  __slots__ = ('base', 'exponent')

  node_type = NodeType.POW

  def __init__(self, base: Node, exponent: float):
    if not isinstance(base, Node):
      raise TypeError(f"PowNode base must be a node, got {type(base).__name__}")
    if isinstance(exponent, bool) or not isinstance(exponent, numbers.Real):
      raise InvalidExponent(exponent)
    self._freeze(base.arity, base=base, exponent=float(exponent))

  def _evaluate(self, point, args):
    return power(args[0], self.exponent)

  def _evaluate_batch(self, X, args):
    return evaluate_pow(args[0], self.exponent)

  # power rule composed with the chain rule, valid for constant exponents only
  def _derivative(self, index, args):
    return MulNode(
      MulNode(ConstantNode(self.exponent), PowNode(self.base, self.exponent - 1).simplify()).simplify(),
      args[0]
    ).simplify()

  def simplify(self):
    if self.exponent == 0:
      return ConstantNode(1.0)
    if self.exponent == 1:
      return self.base
    if isinstance(self.base, ConstantNode):
      return ConstantNode(power(self.base.value, self.exponent))
    return self

  def _rebuild(self, children):
    base, = children
    if base is self.base:
      return self
    return PowNode(base, self.exponent)

  def _format(self, args):
    base = args[0]
    if isinstance(self.base, (AddNode, MulNode)):
      base = f"({base})"
    return f"{base}^{format_number(self.exponent)}"

  def _to_sympy(self, args):
    return sp.Pow(args[0], sympy_number(self.exponent))

  def children(self):
    return (self.base,)

  def _fields(self):
    return (self.exponent,)
