import pytest

from symbolic_descent import Expression, ConstantNode, VariableNode, AddNode, MulNode, PowNode

x = VariableNode(0)
y = VariableNode(1)


@pytest.mark.parametrize("tree, expected", [
    (AddNode(ConstantNode(0), x), x),
    (AddNode(x, ConstantNode(0)), x),
    (AddNode(ConstantNode(2), ConstantNode(3)), ConstantNode(5)),
    (MulNode(ConstantNode(0), x), ConstantNode(0)),
    (MulNode(x, ConstantNode(0)), ConstantNode(0)),
    (MulNode(ConstantNode(1), x), x),
    (MulNode(x, ConstantNode(1)), x),
    (MulNode(ConstantNode(2), ConstantNode(4)), ConstantNode(8)),
    (PowNode(x, 0), ConstantNode(1)),
    (PowNode(x, 1), x),
    (PowNode(ConstantNode(2), 3), ConstantNode(8)),
    (PowNode(ConstantNode(4), 0.5), ConstantNode(2)),
])
def test_rewrite_rules(tree, expected):
    assert tree.simplify() == expected


@pytest.mark.parametrize("tree", [
    AddNode(x, y),
    MulNode(x, y),
    MulNode(ConstantNode(2), x),
    AddNode(ConstantNode(-1), x),
    PowNode(x, 2),
    x,
    ConstantNode(3),
])
def test_no_rule_returns_same_node(tree):
    assert tree.simplify() is tree


@pytest.mark.parametrize("tree", [
    AddNode(ConstantNode(0), x),
    AddNode(ConstantNode(2), ConstantNode(3)),
    MulNode(x, ConstantNode(0)),
    MulNode(ConstantNode(1), y),
    MulNode(ConstantNode(2), x),
    PowNode(x, 0),
    PowNode(x, 1),
    PowNode(ConstantNode(3), 2),
    PowNode(AddNode(x, y), 3),
])
def test_simplify_is_idempotent(tree):
    once = tree.simplify()
    assert once.simplify() == once


def test_zero_product_wins_over_other_operand():
    # 0 * x^-1 is rewritten to 0 without looking at the other factor
    assert MulNode(ConstantNode(0), PowNode(x, -1)).simplify() == ConstantNode(0)


def test_identity_rules_fire_before_folding():
    assert AddNode(ConstantNode(0), ConstantNode(7)).simplify() == ConstantNode(7)
    assert MulNode(ConstantNode(1), ConstantNode(7)).simplify() == ConstantNode(7)


def test_simplify_is_shallow():
    tree = AddNode(AddNode(ConstantNode(1), ConstantNode(2)), x)
    assert tree.simplify() is tree
    assert tree.simplify_deep() == AddNode(ConstantNode(3), x)


def test_simplify_deep_reaches_fixpoint_bottom_up():
    # ((0 + x) * 1)^1 + (2 * 3)
    tree = AddNode(PowNode(MulNode(AddNode(ConstantNode(0), x), ConstantNode(1)), 1),
                   MulNode(ConstantNode(2), ConstantNode(3)))
    assert tree.simplify_deep() == AddNode(x, ConstantNode(6))
    assert Expression(tree).simplify_deep().to_string() == "x_0 + 6.0"


def test_constant_folding_uses_float_pow():
    folded = PowNode(ConstantNode(-8), 1 / 3).simplify()
    assert isinstance(folded, ConstantNode)
    assert folded.value != folded.value  # nan


def test_expression_simplify_wrapper():
    expression = Expression(MulNode(ConstantNode(1), x))
    assert expression.simplify() == Expression(x)
    unchanged = Expression(MulNode(x, y))
    assert unchanged.simplify() is unchanged
