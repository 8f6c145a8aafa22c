from lazystride.alias import requires_temporary
from lazystride.assign import apply, evaluate
from lazystride.backend.base import AssignOps, ElemwiseOps, Expression
from lazystride.backend.cpu import CPUArray
from lazystride.errors import BroadcastWriteError, RankMismatch, ShapeMismatch
from lazystride.expr import BinaryOp, Scalar, UnaryOp
from lazystride.noalias import NoAlias, noalias
from lazystride.utils.array import broadcast_shape, broadcast_strides

__all__ = [
  "requires_temporary", "apply", "evaluate", "AssignOps", "ElemwiseOps", "Expression", "CPUArray",
  "BroadcastWriteError", "RankMismatch", "ShapeMismatch", "BinaryOp", "Scalar", "UnaryOp",
  "NoAlias", "noalias", "broadcast_shape", "broadcast_strides",
]
