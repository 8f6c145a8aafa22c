import copy

import numpy as np

from lazystride.backend.base import AssignOps, Expression
from lazystride.dtype import float32
from lazystride.env import LAYOUT
from lazystride.utils.array import (broadcast_strides, calculate_contiguity, calculate_overlap, calculate_strides,
                                    linear_offset, ndindex, permuted_strides)
from lazystride.utils.math import prod

def storage_span(shape, strides):
  if prod(shape) == 0:
    return 0
  return 1 + sum((d - 1) * s for d, s in zip(shape, strides))

class CPUArray(Expression):
  """Strided container over a flat numpy buffer.

  ``strides`` and ``offset`` are counted in elements. A container built with a
  named ``layout`` keeps that policy across resizes; one built from an explicit
  stride vector keeps the strides as given and falls back to ``LAYOUT`` when resized.
  """
  for op in ("add", "sub", "mul", "div"):
    op_ = "truediv" if op == "div" else op
    exec(f"def __i{op_}__(self, other): self.apply(other, AssignOps.{op.upper()}); return self")

  def __init__(self, data=None, shape=None, dtype=float32, strides=None, layout=None):
    if data is not None:
      data = np.asarray(data, dtype=dtype)
      shape = data.shape
    assert shape is not None, "Array shape is None!"
    self.shape, self.dtype = tuple(shape), np.dtype(dtype).type
    if strides is None:
      self.layout = LAYOUT if layout is None else layout
      self.strides = calculate_strides(self.shape, self.layout)
    else:
      assert layout is None, "Specify either layout or strides, not both"
      assert len(strides) == len(self.shape), f"Invalid strides {strides} for shape {self.shape}"
      assert all(s >= 0 for s in strides), f"Negative strides {strides} not supported"
      assert not calculate_overlap(self.shape, strides), f"Strides {strides} overlap for shape {self.shape}"
      self.layout, self.strides = None, tuple(strides)
    self.offset = 0  # offset relative to the beginning of the buffer
    self.buffer = np.empty(storage_span(self.shape, self.strides), dtype=self.dtype)
    if data is not None:
      if self.layout is not None:
        self.buffer[:] = data.ravel(order=self.layout)
      else:
        for idx in ndindex(self.shape):
          self.setitem_offset(linear_offset(idx, self.strides), data[idx])
    self._update_flags()

  def __repr__(self):
    return f"<{self.__class__.__name__} dtype={self.dtype.__name__} shape={self.shape} strides={self.strides}>"

  def _update_flags(self):
    # meta infos (https://numpy.org/doc/stable/dev/internals.html#numpy-internals)
    self.c_contiguous, self.f_contiguous = calculate_contiguity(self.shape, self.strides)
    self.overlapping = calculate_overlap(self.shape, self.strides)

  @property
  def is_container(self):
    return True

  def getitem_offset(self, offset):
    return self.buffer[offset]

  def setitem_offset(self, offset, value):
    self.buffer[offset] = value

  def resize(self, shape):
    """Reallocate storage for ``shape``; previous contents are discarded."""
    self.shape = tuple(shape)
    if self.layout is None:
      self.layout = LAYOUT
    self.strides = calculate_strides(self.shape, self.layout)
    self.offset = 0
    self.buffer = np.empty(prod(self.shape), dtype=self.dtype)
    self._update_flags()
    return self

  # ##### Expression interface #####
  def kernel(self, shape):
    strides = broadcast_strides(self.shape, self.strides, shape)
    getitem, offset = self.getitem_offset, self.offset
    return lambda index: getitem(linear_offset(index, strides, offset))

  def flat(self, size):
    return self.buffer[self.offset:self.offset+size]

  def numpy(self):
    itemsize = self.buffer.itemsize
    if not self.size:
      return np.empty(self.shape, dtype=self.dtype)
    view = np.lib.stride_tricks.as_strided(
        self.buffer[self.offset:], shape=self.shape, strides=[s * itemsize for s in self.strides])
    return view.copy()

  # ##### Assignment #####
  def apply(self, other, operator):
    from lazystride.assign import apply
    apply(self, other, operator)
    return self

  def assign(self, other):
    return self.apply(other, AssignOps.ASSIGN)

  def __setitem__(self, key, value):
    assert key is Ellipsis, f"Only `arr[...] = value` is supported, got key {key!r}"
    self.assign(value)

  # ##### View Ops #####
  def _view(self, shape, strides):
    inst = copy.copy(self)
    inst.shape, inst.strides = tuple(shape), tuple(strides)
    inst.layout = None
    inst._update_flags()
    return inst

  def permute(self, axes):
    assert sorted(list(axes)) == list(range(self.ndim)), f"Invalid axes {axes}"
    return self._view(tuple(self.shape[a] for a in axes), tuple(self.strides[a] for a in axes))

  @property
  def T(self):
    return self.permute(axes=tuple(range(self.ndim)[::-1]))

  def expand(self, shape):
    return self._view(shape, broadcast_strides(self.shape, self.strides, tuple(shape)))

  # ##### Creation Ops #####
  @classmethod
  def empty(cls, shape, dtype=float32, layout=None):
    return cls(shape=shape, dtype=dtype, layout=layout)

  @classmethod
  def full(cls, shape, value, dtype=float32, layout=None):
    inst = cls(shape=shape, dtype=dtype, layout=layout)
    inst.buffer.fill(value)
    return inst

  @classmethod
  def zeros(cls, shape, dtype=float32, layout=None):
    return cls.full(shape, 0, dtype=dtype, layout=layout)

  @classmethod
  def permuted(cls, data, order, dtype=float32):
    """Store ``data`` densely with axes ``order`` running from slowest to fastest."""
    shape = np.shape(data)
    return cls(data, dtype=dtype, strides=permuted_strides(shape, order))
