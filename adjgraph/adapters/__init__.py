# Adapters are imported on demand so that optional dependencies stay optional:
#   from adjgraph.adapters.networkx import to_nx, from_nx

__all__ = ["networkx"]
