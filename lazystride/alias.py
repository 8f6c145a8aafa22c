from lazystride.graph import ExprGraph

def requires_temporary(destination, source, graph=None):
  """Whether evaluating ``source`` straight into ``destination`` could read overwritten values.

  The check is by storage handle: any leaf of ``source`` backed by the same buffer
  as ``destination`` (the container itself, or a view of it) forces a temporary.
  It never tries to prove that overlapping reads and writes are harmless, so it may
  ask for a temporary that was not strictly needed but never misses a shared buffer.
  """
  if not source.is_container and not source.children:
    return False
  if graph is None:
    graph = ExprGraph(source)
  return graph.depends_on(id(destination.buffer))
