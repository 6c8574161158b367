import numpy as np
import numba
from enum import IntEnum

class NodeType(IntEnum):
  CONSTANT = 0
  VARIABLE = 1
  ADD = 2
  MUL = 3
  POW = 4

class OpType(IntEnum):
  # Tape instructions, one per flattened node
  LOAD_CONST = 0
  LOAD_VAR = 1
  ADD = 2
  MUL = 3
  POW = 4

# Mapping dictionaries
NODE_OP_MAP = {
    NodeType.CONSTANT: OpType.LOAD_CONST,
    NodeType.VARIABLE: OpType.LOAD_VAR,
    NodeType.ADD: OpType.ADD,
    NodeType.MUL: OpType.MUL,
    NodeType.POW: OpType.POW,
}

@numba.njit(cache=True)
def power(base, exponent):
  # C pow semantics: nan for negative base and fractional exponent, inf on overflow
  return np.power(base, exponent)

@numba.njit(cache=True, inline='always')
def evaluate_variable(X, index):
  return X[:, index].astype(np.float64)

@numba.njit(cache=True, inline='always')
def evaluate_constant(n_samples, value):
  return np.full(n_samples, value, dtype=np.float64)

@numba.njit(cache=True)
def evaluate_add(left_val, right_val):
  return left_val + right_val

@numba.njit(cache=True)
def evaluate_mul(left_val, right_val):
  return left_val * right_val

@numba.njit(cache=True)
def evaluate_pow(base_val, exponent):
  return np.power(base_val, exponent)

@numba.njit(cache=True)
def evaluate_tape(ops, lhs, rhs, args, point):
  n_ops = ops.shape[0]
  slots = np.empty(n_ops, dtype=np.float64)
  for k in range(n_ops):
    op = ops[k]
    if op == OpType.LOAD_CONST:
      slots[k] = args[k]
    elif op == OpType.LOAD_VAR:
      slots[k] = point[lhs[k]]
    elif op == OpType.ADD:
      slots[k] = slots[lhs[k]] + slots[rhs[k]]
    elif op == OpType.MUL:
      slots[k] = slots[lhs[k]] * slots[rhs[k]]
    else:
      slots[k] = np.power(slots[lhs[k]], args[k])
  return slots[n_ops - 1]

@numba.njit(cache=True)
def evaluate_tape_batch(ops, lhs, rhs, args, X):
  n_samples = X.shape[0]
  out = np.empty(n_samples, dtype=np.float64)
  for row in range(n_samples):
    out[row] = evaluate_tape(ops, lhs, rhs, args, X[row])
  return out
