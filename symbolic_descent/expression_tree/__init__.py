"""Expression Tree Module

Immutable expression trees over x_0, x_1, ...: evaluation, symbolic
differentiation, one-level simplification and formula parsing.
"""

from .expression import Expression
from .core.node import (
    Node,
    ConstantNode,
    VariableNode,
    BinaryNode,
    AddNode,
    MulNode,
    PowNode
)
from .core.operators import NodeType, OpType
from .parser import FormulaParser, parse_formula
from .utils import CompiledExpression, SymPyBridge, ExpressionValidator

__all__ = [
    "Expression",
    "Node", "ConstantNode", "VariableNode", "BinaryNode", "AddNode", "MulNode", "PowNode",
    "NodeType", "OpType",
    "FormulaParser", "parse_formula",
    "CompiledExpression", "SymPyBridge", "ExpressionValidator"
]
