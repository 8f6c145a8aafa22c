import os
import tempfile

import networkx as nx

from lazystride.expr import ELEMWISE_SYMBOL, Scalar

class ExprGraph:
  """Directed graph of an expression tree, edges pointing from operand to consumer."""

  def __init__(self, root):
    self.root = root
    self.G = nx.DiGraph()
    self._build(root)

  def _build(self, node):
    if id(node) in self.G.nodes: return
    self.G.add_node(id(node), node=node)
    attrs = self.G.nodes[id(node)]
    if node.is_container:
      attrs["kind"], attrs["storage"] = "container", id(node.buffer)
      attrs["label"] = f"{node.shape}\n{node.strides}\n{id(node)}\nC={int(node.c_contiguous)} F={int(node.f_contiguous)}"
    elif isinstance(node, Scalar):
      attrs["kind"], attrs["label"] = "scalar", f"CONSTANT={node.value}"
    else:
      attrs["kind"], attrs["label"] = "op", f"{node.op.name} ({ELEMWISE_SYMBOL[node.op]})"
    for name, child in zip("AB", node.children):
      self._build(child)
      self.G.add_edge(id(child), id(node), label=name)

  def count(self):
    return self.G.number_of_nodes()

  def containers(self):
    return [attrs["node"] for _, attrs in self.G.nodes(data=True) if attrs["kind"] == "container"]

  def storages(self):
    return {attrs["storage"] for _, attrs in self.G.nodes(data=True) if attrs["kind"] == "container"}

  def depends_on(self, storage):
    """True if any container reachable from the root reads through ``storage``."""
    return storage in self.storages()

  def visualize(self, graph_name, outdir=None):
    colors = {"container": "#e5e5e5", "scalar": "#ecc30b", "op": "#84bcda"}
    G = nx.DiGraph()
    for n, attrs in self.G.nodes(data=True):
      G.add_node(n, label=attrs["label"], shape="box" if attrs["kind"] != "scalar" else "ellipse",
                 style="filled", fillcolor=colors[attrs["kind"]])
    for u, v, attrs in self.G.edges(data=True):
      G.add_edge(u, v, label=attrs["label"])
    outdir = tempfile.gettempdir() if outdir is None else outdir
    path = os.path.join(outdir, f"{graph_name}.dot")
    nx.drawing.nx_pydot.write_dot(G, path)
    print(f"[GRAPH] save to {path}")
    return path
