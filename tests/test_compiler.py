import numpy as np
import pytest

from symbolic_descent import (
    CompiledExpression, ConstantNode, VariableNode, AddNode, MulNode, PowNode,
    IndexOutOfRange, parse_formula, linear_regression_cost,
)
from symbolic_descent.expression_tree.core.operators import OpType
from symbolic_descent.expression_tree.utils import count_distinct_nodes


@pytest.mark.parametrize("formula", [
    "x_0^2 + (x_1+(-2))^4",
    "(x_0*x_1 + 2)^-2 + x_2",
    "(x_0 + 1)^0.5 * x_1^3",
    "4.25",
    "x_3",
])
def test_compiled_matches_tree(formula, rng):
    expression = parse_formula(formula)
    compiled = expression.compile()
    for _ in range(5):
        point = rng.uniform(0.1, 3.0, size=max(expression.arity, 1))
        assert compiled.evaluate(point) == pytest.approx(expression.evaluate(point), rel=1e-12)


def test_compiled_gradient_matches_tree(rng):
    X = rng.uniform(0, 10, size=(15, 2))
    y = X @ np.array([3.0, 2.0]) - 2.0
    cost = linear_regression_cost(X, y)
    point = np.array([0.5, -1.0, 2.0])
    tree_values = [g.evaluate(point) for g in cost.gradient()]
    compiled_values = [g.evaluate(point) for g in cost.compile_gradient()]
    np.testing.assert_allclose(compiled_values, tree_values, rtol=1e-12)


def test_shared_subtrees_are_emitted_once():
    shared = MulNode(VariableNode(0), VariableNode(1))
    compiled = CompiledExpression(AddNode(shared, shared))
    assert len(compiled) == 4
    assert compiled.ops[-1] == OpType.ADD

    # structurally equal but distinct objects are merged as well
    twin = AddNode(MulNode(VariableNode(0), VariableNode(1)), MulNode(VariableNode(0), VariableNode(1)))
    assert len(CompiledExpression(twin)) == count_distinct_nodes(twin) == 4


def test_tape_layout():
    compiled = CompiledExpression(PowNode(AddNode(VariableNode(2), ConstantNode(1.5)), 3))
    assert list(compiled.ops) == [OpType.LOAD_VAR, OpType.LOAD_CONST, OpType.ADD, OpType.POW]
    assert compiled.lhs[0] == 2
    assert compiled.args[1] == 1.5
    assert compiled.args[3] == 3.0
    assert compiled.arity == 3


def test_compiled_validates_points():
    compiled = parse_formula("x_0 + x_2").compile()
    with pytest.raises(IndexOutOfRange):
        compiled.evaluate([1.0, 2.0])
    with pytest.raises(IndexOutOfRange):
        compiled.evaluate_batch(np.ones((3, 2)))


def test_compiled_batch(rng):
    expression = parse_formula("x_0*x_1 + 1")
    X = np.array([[1.0, 2.0], [3.0, 4.0]])
    np.testing.assert_allclose(expression.compile().evaluate_batch(X), [3.0, 13.0])
    X = rng.normal(size=(40, 2))
    np.testing.assert_allclose(expression.compile().evaluate_batch(X), expression.evaluate_batch(X))


def test_compiled_pow_keeps_nan_semantics():
    compiled = PowNode(VariableNode(0), 0.5)
    assert np.isnan(CompiledExpression(compiled).evaluate([-1.0]))
