"""Utilities for expression trees."""

from .compiler import CompiledExpression, flatten_to_tape
from .sympy_utils import SymPyBridge
from .validator import ExpressionValidator
from .tree_utils import (
    get_all_nodes, calculate_tree_depth, count_distinct_nodes,
    find_nodes_by_type, get_variables, get_constants
)

__all__ = [
    'CompiledExpression', 'flatten_to_tape', 'SymPyBridge', 'ExpressionValidator',
    'get_all_nodes', 'calculate_tree_depth', 'count_distinct_nodes',
    'find_nodes_by_type', 'get_variables', 'get_constants'
]
