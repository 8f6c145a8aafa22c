import itertools

from lazystride.errors import ShapeMismatch
from lazystride.utils.math import prod

LAYOUTS = ("C", "F")

def calculate_strides(shape, layout="C"):
  assert layout in LAYOUTS, f"Invalid layout {layout}"
  if layout == "C":
    return tuple(prod(shape[i+1:]) for i in range(len(shape)))
  return tuple(prod(shape[:i]) for i in range(len(shape)))

def permuted_strides(shape, order):
  """Dense strides where ``order`` lists the axes from slowest to fastest varying.

  ``order=range(ndim)`` is row-major and the reversed order is column-major; any
  other permutation yields one of the non-canonical dense layouts.
  """
  order = tuple(order)
  assert sorted(order) == list(range(len(shape))), f"Invalid axes order {order} for shape {shape}"
  strides, nitems = [0] * len(shape), 1
  for axis in reversed(order):
    strides[axis] = nitems
    nitems *= shape[axis]
  return tuple(strides)

def calculate_contiguity(shape, strides):
  # https://github.com/numpy/numpy/blob/93a97649aa0aefc0ee8ee5fc7cb78063bfe67255/numpy/core/src/multiarray/flagsobject.c#L115
  assert len(shape) == len(strides)
  ndim = len(shape)
  c_contiguous = f_contiguous = True
  if ndim:
    nitems = 1
    for i in range(ndim-1, -1, -1):
      if shape[i] == 0:
        return True, True
      if shape[i] != 1:
        if strides[i] != nitems:
          c_contiguous = False
        nitems *= shape[i]
    nitems = 1
    for i in range(ndim):
      if shape[i] != 1:
        if strides[i] != nitems:
          f_contiguous = False
        nitems *= shape[i]
  return c_contiguous, f_contiguous

def calculate_overlap(shape, strides):
  """True if two positions of ``shape`` may map to the same storage cell.

  Each axis must step past the whole extent of the axes that vary faster than it,
  so zero strides and interleaved strides on non-trivial axes both count.
  """
  if prod(shape) == 0:
    return False
  span = 1
  for s, d in sorted((s, d) for d, s in zip(shape, strides) if d > 1):
    if s < span:
      return True
    span += (d - 1) * s
  return False

def linear_offset(index, strides, offset=0):
  return offset + sum(i * s for i, s in zip(index, strides))

def ndindex(shape):
  # most significant dimension outermost
  return itertools.product(*(range(d) for d in shape))

def broadcast_shape(*shapes):
  # https://numpy.org/doc/stable/user/basics.broadcasting.html
  if not shapes:
    return ()
  ndim = max(len(s) for s in shapes)
  padded = [(1,) * (ndim - len(s)) + tuple(s) for s in shapes]
  ret = []
  for dims in zip(*padded):
    unique = set(dims) - {1}
    if len(unique) > 1:
      raise ShapeMismatch(*shapes)
    ret.append(unique.pop() if unique else 1)
  return tuple(ret)

def broadcast_strides(shape, strides, target_shape):
  """Strides that read an operand of ``shape`` as if it had ``target_shape``.

  Dimensions repeated by broadcasting, and leading dimensions added by rank
  padding, get stride 0.
  """
  assert len(shape) == len(strides)
  pad = len(target_shape) - len(shape)
  if pad < 0:
    raise ShapeMismatch(shape, target_shape)
  ret = [0] * pad
  for d, s, t in zip(shape, strides, target_shape[pad:]):
    if d == t:
      ret.append(s)
    elif d == 1:
      ret.append(0)
    else:
      raise ShapeMismatch(shape, target_shape)
  return tuple(ret)
