import sympy as sp
from typing import Union, List

from ..core.node import Node

SympyConvertible = Union[Node, sp.Expr, 'Expression']


class SymPyBridge:
  """Cross-checks expression trees against SymPy"""

  @staticmethod
  def to_sympy(expr: SympyConvertible) -> sp.Expr:
    if isinstance(expr, sp.Basic):
      return expr
    if hasattr(expr, 'root'):
      expr = expr.root
    return expr.to_sympy()

  @staticmethod
  def symbols(n_vars: int) -> List[sp.Symbol]:
    """The symbols x_0 .. x_{n-1} used by Node.to_sympy"""
    return [sp.Symbol(f'x_{i}', real=True) for i in range(n_vars)]

  def is_equivalent(self, a: SympyConvertible, b: SympyConvertible) -> bool:
    """True when a - b simplifies to zero"""
    difference = sp.simplify(sp.expand(self.to_sympy(a) - self.to_sympy(b)))
    if difference == 0:
      return True
    # Float coefficients can leave residues like 1.0e-16*x_0
    return bool(sp.nsimplify(difference, tolerance=1e-12, rational=True) == 0)

  def derivative(self, expr: SympyConvertible, index: int) -> sp.Expr:
    return sp.diff(self.to_sympy(expr), self.symbols(index + 1)[index])

  def latex_representation(self, expr: SympyConvertible) -> str:
    return sp.latex(self.to_sympy(expr))
