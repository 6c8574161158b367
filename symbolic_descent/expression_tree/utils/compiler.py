"""
Expression Compiler

Flattens an expression DAG into a post-order instruction tape that the numba
kernels in core.operators evaluate without Python-level recursion. Equal
subtrees are emitted once, so shared structure (very common in gradients
produced by the product and chain rules) is computed once per evaluation.
"""

import numpy as np
from typing import Dict, List, Tuple

from ..core.node import Node, PointLike, as_point_array, as_samples
from ..core.operators import NodeType, OpType, NODE_OP_MAP, evaluate_tape, evaluate_tape_batch


def flatten_to_tape(root: Node) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """
    Emit every distinct subtree of `root` once, children before parents.

    Returns:
        (ops, lhs, rhs, args) arrays; the root is the last instruction.
    """
    slot_of: Dict[Node, int] = {}
    ops: List[int] = []
    lhs: List[int] = []
    rhs: List[int] = []
    args: List[float] = []

    stack = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        if node in slot_of:
            continue
        children = node.children()
        if children and not expanded:
            stack.append((node, True))
            for child in reversed(children):
                if child not in slot_of:
                    stack.append((child, False))
            continue

        op = NODE_OP_MAP[node.node_type]
        left = right = 0
        arg = 0.0
        if node.node_type == NodeType.CONSTANT:
            arg = node.value
        elif node.node_type == NodeType.VARIABLE:
            left = node.index
        elif node.node_type == NodeType.POW:
            left = slot_of[node.base]
            arg = node.exponent
        else:
            left = slot_of[node.left]
            right = slot_of[node.right]

        slot_of[node] = len(ops)
        ops.append(int(op))
        lhs.append(left)
        rhs.append(right)
        args.append(arg)

    return (np.asarray(ops, dtype=np.int64),
            np.asarray(lhs, dtype=np.int64),
            np.asarray(rhs, dtype=np.int64),
            np.asarray(args, dtype=np.float64))


class CompiledExpression:
    """Tape form of an expression; evaluates to the same values as the tree"""

    __slots__ = ('ops', 'lhs', 'rhs', 'args', 'arity')

    def __init__(self, root: Node):
        self.ops, self.lhs, self.rhs, self.args = flatten_to_tape(root)
        self.arity = root.arity

    def __len__(self) -> int:
        return int(self.ops.shape[0])

    def evaluate(self, point: PointLike) -> float:
        return self.evaluate_unchecked(as_point_array(point, self.arity))

    def evaluate_unchecked(self, values: np.ndarray) -> float:
        """Evaluate at a float64 array already known to cover the arity"""
        return float(evaluate_tape(self.ops, self.lhs, self.rhs, self.args, values))

    def evaluate_batch(self, X: np.ndarray) -> np.ndarray:
        return evaluate_tape_batch(self.ops, self.lhs, self.rhs, self.args, as_samples(X, self.arity))

    def __repr__(self) -> str:
        n_loads = int(np.count_nonzero(self.ops <= OpType.LOAD_VAR))
        return f"CompiledExpression(instructions={len(self)}, loads={n_loads}, arity={self.arity})"
