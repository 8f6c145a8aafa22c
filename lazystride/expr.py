import numbers
import operator

import numpy as np

from lazystride.backend.base import ElemwiseOps, Expression
from lazystride.utils.array import broadcast_shape

def divide(a, b):
  # integer operands keep their dtype: floor division, zero divisor is an error
  if np.result_type(a, b).kind in "iu":
    if np.any(np.equal(b, 0)):
      raise ZeroDivisionError("integer division by zero")
    return a // b
  return a / b

ELEMWISE_FN = {
  ElemwiseOps.NEG: operator.neg, ElemwiseOps.ADD: operator.add, ElemwiseOps.SUB: operator.sub,
  ElemwiseOps.MUL: operator.mul, ElemwiseOps.DIV: divide
}
ELEMWISE_SYMBOL = {
  ElemwiseOps.NEG: "-", ElemwiseOps.ADD: "+", ElemwiseOps.SUB: "-",
  ElemwiseOps.MUL: "*", ElemwiseOps.DIV: "/"
}

def as_expression(obj):
  if isinstance(obj, Expression):
    return obj
  if isinstance(obj, (numbers.Number, np.generic)):
    return Scalar(obj)
  from lazystride.backend.cpu import CPUArray
  obj = np.asarray(obj)
  return CPUArray(obj, dtype=obj.dtype)

def _result_type(*nodes):
  # python scalars stay weakly typed so `a * 2` keeps the dtype of `a`
  return np.result_type(*(n.value if isinstance(n, Scalar) else n.dtype for n in nodes))

class Scalar(Expression):
  def __init__(self, value):
    self.value = value

  def __repr__(self):
    return f"<Scalar value={self.value!r}>"

  @property
  def shape(self):
    return ()

  @property
  def dtype(self):
    return np.result_type(self.value)

  def kernel(self, shape):
    value = self.value
    return lambda index: value

  def flat(self, size):
    return self.value

class UnaryOp(Expression):
  def __init__(self, op, operand):
    self.op = op
    self.operand = as_expression(operand)

  def __repr__(self):
    return f"<UnaryOp op={self.op.name} shape={self.shape}>"

  @property
  def children(self):
    return (self.operand,)

  @property
  def shape(self):
    return self.operand.shape

  @property
  def dtype(self):
    return _result_type(self.operand)

  def kernel(self, shape):
    fn, operand = ELEMWISE_FN[self.op], self.operand.kernel(shape)
    return lambda index: fn(operand(index))

  def flat(self, size):
    return ELEMWISE_FN[self.op](self.operand.flat(size))

class BinaryOp(Expression):
  def __init__(self, op, lhs, rhs):
    self.op = op
    self.lhs, self.rhs = as_expression(lhs), as_expression(rhs)

  def __repr__(self):
    return f"<BinaryOp op={self.op.name} lhs={self.lhs!r} rhs={self.rhs!r}>"

  @property
  def children(self):
    return (self.lhs, self.rhs)

  @property
  def shape(self):
    return broadcast_shape(self.lhs.shape, self.rhs.shape)

  @property
  def dtype(self):
    return _result_type(self.lhs, self.rhs)

  def kernel(self, shape):
    fn = ELEMWISE_FN[self.op]
    lhs, rhs = self.lhs.kernel(shape), self.rhs.kernel(shape)
    return lambda index: fn(lhs(index), rhs(index))

  def flat(self, size):
    return ELEMWISE_FN[self.op](self.lhs.flat(size), self.rhs.flat(size))
