from dataclasses import dataclass
from typing import Any

import numpy as np

# Matrix cell value meaning "no edge". Valid weights are non-negative.
SENTINEL = -1

# Largest weight a matrix cell (int64) can hold.
MAX_WEIGHT = int(np.iinfo(np.int64).max)

# Rows/columns allocated by a fresh DirectedGraph.
DEFAULT_CAPACITY = 10


@dataclass(frozen=True)
class Edge:
    """Directed weighted edge (source, destination, weight).

    Edges are reported by value; the graph itself only stores weights in its
    matrix. Equality/hash cover all three fields, so
    ``Edge("A", "B", 1) != Edge("A", "B", 2)``.

    Attributes:
        source: Label of the tail vertex
        destination: Label of the head vertex
        weight: Integer weight in ``[0, MAX_WEIGHT]``
    """

    source: Any
    destination: Any
    weight: int

    def as_tuple(self):
        return (self.source, self.destination, self.weight)
