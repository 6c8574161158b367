"""Core expression tree components."""

from .node import Node, ConstantNode, VariableNode, BinaryNode, AddNode, MulNode, PowNode
from .operators import (
    NodeType, OpType, NODE_OP_MAP, power,
    evaluate_variable, evaluate_constant, evaluate_add, evaluate_mul, evaluate_pow,
    evaluate_tape, evaluate_tape_batch
)

__all__ = [
    'Node', 'ConstantNode', 'VariableNode', 'BinaryNode', 'AddNode', 'MulNode', 'PowNode',
    'NodeType', 'OpType', 'NODE_OP_MAP', 'power',
    'evaluate_variable', 'evaluate_constant', 'evaluate_add', 'evaluate_mul', 'evaluate_pow',
    'evaluate_tape', 'evaluate_tape_batch'
]
