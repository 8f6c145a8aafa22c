import contextlib
import operator

import numpy as np

from lazystride.alias import requires_temporary
from lazystride.backend.base import AssignOps
from lazystride.backend.cpu import CPUArray
from lazystride.env import DEBUG, FPE, GRAPH, OPT_LINEAR_ITERATION
from lazystride.errors import BroadcastWriteError, ShapeMismatch
from lazystride.expr import as_expression, divide
from lazystride.graph import ExprGraph
from lazystride.utils.array import broadcast_shape, linear_offset, ndindex
from lazystride.utils.helper import assignstat, genname
from lazystride.utils.math import prod

ASSIGN_FN = {
  AssignOps.ASSIGN: lambda a, b: b, AssignOps.ADD: operator.add, AssignOps.SUB: operator.sub,
  AssignOps.MUL: operator.mul, AssignOps.DIV: divide
}

def target_shape(destination, source, op):
  shape = broadcast_shape(destination.shape, source.shape)
  if op != AssignOps.ASSIGN and shape != destination.shape:
    raise ShapeMismatch(destination.shape, source.shape,
                        msg=f"cannot {op.name.lower()} {source.shape} into fixed destination shape {destination.shape}")
  return shape

def linear_layout(destination, source, shape):
  """Layout under which destination and every leaf can be walked as one flat run, else None."""
  arrs = [destination, *source.leaves()]
  if any(arr.shape != shape for arr in arrs):
    return None
  for layout, flag in (("C", "c_contiguous"), ("F", "f_contiguous")):
    if all(getattr(arr, flag) for arr in arrs):
      return layout
  return None

def _errstate():
  return np.errstate(all="raise") if FPE else contextlib.nullcontext()

def run(destination, source, shape, op):
  """Combine ``source`` into every position of ``destination``; returns the iteration mode used."""
  fn = ASSIGN_FN[op]
  with _errstate():
    if OPT_LINEAR_ITERATION and linear_layout(destination, source, shape) is not None:
      size = prod(shape)
      out = destination.buffer[destination.offset:destination.offset+size]
      out[...] = fn(out, source.flat(size))
      return "linear"
    value = source.kernel(shape)
    strides, offset = destination.strides, destination.offset
    for index in ndindex(shape):
      i = linear_offset(index, strides, offset)
      destination.setitem_offset(i, fn(destination.getitem_offset(i), value(index)))
    return "strided"

def materialize(source, shape, layout=None):
  tmp = CPUArray(shape=shape, dtype=source.dtype, layout=layout)
  mode = run(tmp, source, shape, AssignOps.ASSIGN)
  if DEBUG >= 2: print(f"[DEBUG] temporary {genname('tmp', tmp)} shape={shape} mode={mode}")
  return tmp

def evaluate(source, layout=None):
  source = as_expression(source)
  return materialize(source, source.shape, layout=layout)

def apply(destination, source, op, check_alias=True):
  """Assign or combine ``source`` into ``destination`` in place.

  Plain assignment resizes ``destination`` to the broadcast shape of both sides;
  compound operators require ``source`` to broadcast to the destination's current
  shape. Unless ``check_alias`` is False, a source that reads the destination's
  storage is first evaluated into a temporary. Element errors abort the loop and
  leave already-written elements in place.
  """
  source = as_expression(source)
  shape = target_shape(destination, source, op)
  if destination.shape == shape and destination.overlapping:
    raise BroadcastWriteError(f"cannot write into overlapping view {destination}")

  graph = ExprGraph(source) if check_alias or GRAPH else None
  temporary = check_alias and requires_temporary(destination, source, graph=graph)
  if GRAPH:
    print(f"[GRAPH] {graph.count()} nodes")
    graph.visualize(genname("assign", destination, source))

  if temporary:
    source = materialize(source, shape)
  if destination.shape != shape:
    if DEBUG >= 2: print(f"[DEBUG] resize {destination.shape} -> {shape}")
    destination.resize(shape)
  mode = run(destination, source, shape, op)

  strategy = "temporary" if temporary else "direct"
  assignstat.log(op, strategy, mode)
  if DEBUG: print(f"[DEBUG] {op.name} shape={shape} strategy={strategy} mode={mode}")
  return destination
