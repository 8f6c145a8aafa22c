from enum import Enum

from lazystride.errors import RankMismatch
from lazystride.utils.math import prod

ElemwiseOps = Enum("ElemwiseOps", ["NEG", "ADD", "SUB", "MUL", "DIV"])
AssignOps = Enum("AssignOps", ["ASSIGN", "ADD", "SUB", "MUL", "DIV"])

class Expression:
  """Shared interface of everything that can appear in an expression tree.

  Subclasses provide ``shape``, ``dtype``, ``children`` and ``kernel``. Arithmetic
  operators only build new tree nodes; nothing is evaluated until ``at``,
  ``evaluate`` or an assignment asks for values.
  """
  for op in ("add", "sub", "mul", "div"):
    op_ = "truediv" if op == "div" else op
    exec(f"def __{op_}__(self, other): return self.binary(ElemwiseOps.{op.upper()}, self, other)")
    exec(f"def __r{op_}__(self, other): return self.binary(ElemwiseOps.{op.upper()}, other, self)")
  exec("def __neg__(self): return self.unary(ElemwiseOps.NEG, self)")

  # numpy operands on the left defer to the reflected operators above
  __array_ufunc__ = None

  @staticmethod
  def binary(op, lhs, rhs):
    from lazystride.expr import BinaryOp
    return BinaryOp(op, lhs, rhs)

  @staticmethod
  def unary(op, operand):
    from lazystride.expr import UnaryOp
    return UnaryOp(op, operand)

  @property
  def children(self):
    return ()

  @property
  def ndim(self):
    return len(self.shape)

  @property
  def size(self):
    return prod(self.shape)

  def kernel(self, shape):
    """Return ``index -> value`` reading this expression broadcast to ``shape``."""
    raise NotImplementedError

  def flat(self, size):
    """Values of a fully contiguous expression as a flat sequence of ``size`` items."""
    raise NotImplementedError

  def at(self, index):
    index = tuple(index)
    shape = self.shape
    if len(index) != len(shape):
      raise RankMismatch(f"index {index} has rank {len(index)}, expression has rank {len(shape)}")
    for i, d in zip(index, shape):
      if not 0 <= i < d:
        raise RankMismatch(f"index {index} out of range for shape {shape}")
    return self.kernel(shape)(index)

  def leaves(self):
    """Leaf containers of the tree, depth-first, each listed once."""
    ret, visited = [], set()
    def visit(node):
      if id(node) in visited: return
      visited.add(id(node))
      if node.is_container:
        ret.append(node)
      for child in node.children:
        visit(child)
    visit(self)
    return ret

  @property
  def is_container(self):
    return False

  def evaluate(self, layout=None):
    from lazystride.assign import evaluate
    return evaluate(self, layout=layout)

  def numpy(self):
    return self.evaluate().numpy()
