from lazystride.assign import apply
from lazystride.backend.base import AssignOps

class NoAlias:
  """Assignment handle that writes straight into ``container``.

  The alias check is skipped: the caller guarantees that the right-hand side never
  reads the container's storage. If it does, the result is undefined.
  """
  for op in ("add", "sub", "mul", "div"):
    op_ = "truediv" if op == "div" else op
    exec(f"def __i{op_}__(self, other): apply(self.container, other, AssignOps.{op.upper()}, check_alias=False); return self")

  def __init__(self, container):
    self.container = container

  def __repr__(self):
    return f"<NoAlias {self.container!r}>"

  def assign(self, other):
    apply(self.container, other, AssignOps.ASSIGN, check_alias=False)
    return self.container

  def __setitem__(self, key, value):
    assert key is Ellipsis, f"Only `noalias(arr)[...] = value` is supported, got key {key!r}"
    self.assign(value)

def noalias(container):
  return NoAlias(container)
