"""
Tree Utility Functions

Traversal and analysis helpers shared by the Expression facade, the
compiler and the tests. Traversals are iterative so that long left-deep
chains (e.g. hand-built sums) do not hit the recursion limit.
"""

from typing import List

from ..core.node import Node, ConstantNode, VariableNode



def get_all_nodes(node: Node, traversal_order: str = 'breadth_first') -> List[Node]:
    """
    Get all nodes in the tree using specified traversal order.

    Shared subtrees are visited once per parent, i.e. the result counts
    tree positions, not distinct objects.

    Args:
        node: Root node of the tree
        traversal_order: 'breadth_first' (default) or 'depth_first'

    Returns:
        List of all nodes in the tree
    """
    if traversal_order == 'breadth_first':
        return _breadth_first_traversal(node)
    elif traversal_order == 'depth_first':
        return _depth_first_traversal(node)
    else:
        raise ValueError(f"Invalid traversal_order: {traversal_order}")


def _breadth_first_traversal(node: Node) -> List[Node]:
    nodes_to_visit = [node]
    all_nodes = []
    position = 0

    while position < len(nodes_to_visit):
        current_node = nodes_to_visit[position]
        position += 1
        all_nodes.append(current_node)
        nodes_to_visit.extend(current_node.children())

    return all_nodes


def _depth_first_traversal(node: Node) -> List[Node]:
    """Pre-order, left child first"""
    stack = [node]
    nodes = []

    while stack:
        current_node = stack.pop()
        nodes.append(current_node)
        stack.extend(reversed(current_node.children()))

    return nodes


def calculate_tree_depth(node: Node) -> int:
    """
    Calculate the maximum depth of the tree.

    Returns:
        Maximum depth (leaf nodes have depth 1)
    """
    max_depth = 0
    stack = [(node, 1)]
    while stack:
        current_node, depth = stack.pop()
        max_depth = max(max_depth, depth)
        for child in current_node.children():
            stack.append((child, depth + 1))
    return max_depth


def count_distinct_nodes(node: Node) -> int:
    """Number of structurally distinct subtrees (what the compiler emits)"""
    seen = set()
    stack = [node]
    while stack:
        current_node = stack.pop()
        if current_node in seen:
            continue
        seen.add(current_node)
        stack.extend(current_node.children())
    return len(seen)


def find_nodes_by_type(node: Node, node_class: type) -> List[Node]:
    return [n for n in get_all_nodes(node, 'depth_first') if isinstance(n, node_class)]


def get_variables(node: Node) -> List[int]:
    """Sorted distinct variable indices referenced by the tree"""
    return sorted({n.index for n in find_nodes_by_type(node, VariableNode)})


def get_constants(node: Node) -> List[float]:
    """Constant values in depth-first order"""
    return [n.value for n in find_nodes_by_type(node, ConstantNode)]

