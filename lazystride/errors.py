class ShapeMismatch(ValueError):
  """Operand shapes that cannot be broadcast against each other."""

  def __init__(self, *shapes, msg=None):
    self.shapes = tuple(tuple(s) for s in shapes)
    if msg is None:
      msg = "shapes " + " ".join(str(s) for s in self.shapes) + " are not broadcast-compatible"
    super().__init__(msg)

class RankMismatch(IndexError):
  """An index whose rank (or range) does not fit the expression it addresses."""

class BroadcastWriteError(ValueError):
  """Write into a view where several logical positions share one storage cell."""
