import os

DEBUG = int(os.getenv("DEBUG", "0"))
GRAPH = int(os.getenv("GRAPH", "0"))
LAYOUT = os.getenv("LAYOUT", "C")
FPE = int(os.getenv("FPE", "0"))

OPT_LINEAR_ITERATION = int(os.getenv("OPT_LINEAR_ITERATION", "1"))

assert LAYOUT in ("C", "F"), f"layout {LAYOUT} not supported!"
