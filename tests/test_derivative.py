import numpy as np
import pytest

from symbolic_descent import (
    Expression, ConstantNode, VariableNode, AddNode, MulNode, PowNode,
    ExpressionValidator, SymPyBridge, parse_formula,
)

x = VariableNode(0)
y = VariableNode(1)

FORMULAS = [
    "x_0^2 + (x_1+(-2))^4",
    "3*x_0*x_1 + x_1^3",
    "(x_0 + 1)^0.5 * x_1^3",
    "(x_0*x_1 + 2)^-2 + x_2",
    "2 + 3*x_1",
    "(x_0 + x_1 + x_2)^3 * (x_0 + (-1.5))",
]

POINTS = [
    [1.5, 0.5, 2.0],
    [0.3, -1.2, 0.7],
    [2.0, 3.0, -0.5],
]


def test_leaf_derivatives():
    assert ConstantNode(7).derivative(0) == ConstantNode(0)
    assert x.derivative(0) == ConstantNode(1)
    assert x.derivative(1) == ConstantNode(0)
    assert VariableNode(3).derivative(3) == ConstantNode(1)


def test_sum_rule_is_simplified():
    assert AddNode(x, ConstantNode(5)).derivative(0) == ConstantNode(1)
    assert AddNode(x, y).derivative(1) == ConstantNode(1)


def test_product_rule_is_simplified():
    assert MulNode(ConstantNode(3), y).derivative(1) == ConstantNode(3)
    assert MulNode(x, y).derivative(0) == y
    assert MulNode(x, y).derivative(1) == x


def test_power_rule():
    assert PowNode(x, 2).derivative(0) == MulNode(ConstantNode(2), x)
    assert PowNode(x, 3).derivative(0) == MulNode(ConstantNode(3), PowNode(x, 2))
    assert PowNode(x, 3).derivative(1) == ConstantNode(0)


def test_derivative_past_arity_is_zero():
    assert PowNode(x, 2).derivative(5) == ConstantNode(0)


def test_derivative_does_not_modify_original():
    tree = parse_formula("x_0^2 + x_0*x_1").root
    before = tree.to_string()
    tree.derivative(0)
    tree.gradient()
    assert tree.to_string() == before


@pytest.mark.parametrize("formula", FORMULAS)
@pytest.mark.parametrize("point", POINTS)
def test_derivative_matches_central_difference(formula, point):
    expression = parse_formula(formula)
    point = point[:expression.arity]
    numeric = ExpressionValidator.numeric_gradient(expression.root, point)
    symbolic = np.array([d.evaluate(point) for d in expression.gradient()])
    np.testing.assert_allclose(symbolic, numeric, rtol=1e-4, atol=1e-4)


@pytest.mark.parametrize("formula", FORMULAS)
def test_gradient_length_equals_arity(formula):
    expression = parse_formula(formula)
    assert len(expression.gradient()) == expression.arity


def test_gradient_of_constant_is_empty():
    assert Expression(ConstantNode(4)).gradient() == []


def test_gradient_of_example():
    expression = parse_formula("2 + 3*x_1")
    assert [g.to_string() for g in expression.gradient()] == ["0.0", "3.0"]


def test_parsed_example_gradient_values():
    expression = parse_formula("x_0^2 + (x_1+(-2))^4")
    values = [g.evaluate([2.0, 3.0]) for g in expression.gradient()]
    assert values == pytest.approx([4.0, 4.0])


def test_check_gradient_uses_forward_differences():
    expression = parse_formula("x_0^3 + 2*x_0*x_1 + x_1^2")
    assert ExpressionValidator.check_gradient(expression.root, [1.0, 2.0]) < 1e-4
    assert ExpressionValidator.check_gradient(ConstantNode(3.0), []) == 0.0


@pytest.mark.parametrize("formula", [
    "x_0^2 + (x_1+(-2))^4",
    "3*x_0*x_1 + x_1^3",
    "(x_0*x_1 + 2)^3 + x_2",
    "(x_0 + x_1)^2 * x_0",
])
def test_derivative_agrees_with_sympy(formula):
    bridge = SymPyBridge()
    expression = parse_formula(formula)
    for i in range(expression.arity):
        assert bridge.is_equivalent(expression.derivative(i), bridge.derivative(expression, i))


def test_latex_representation():
    assert SymPyBridge().latex_representation(parse_formula("x_0^2")) == "x_{0}^{2}"


def test_check_gradient_and_numeric_gradient_difference_schemes():
    square = PowNode(x, 2)
    # forward difference of x^2 at 1 overshoots by epsilon, central is exact
    assert ExpressionValidator.check_gradient(square, [1.0], epsilon=1e-3) == pytest.approx(1e-3, rel=1e-6)
    np.testing.assert_allclose(ExpressionValidator.numeric_gradient(square, [1.0], epsilon=1e-3), [2.0])
