from .structure import Edge, SENTINEL, DEFAULT_CAPACITY, MAX_WEIGHT
from .bijection import Bijection
from .graph import DirectedGraph

__all__ = ["Edge", "SENTINEL", "DEFAULT_CAPACITY", "MAX_WEIGHT", "Bijection", "DirectedGraph"]
