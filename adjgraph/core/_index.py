class IndexManager:
    """Namespace for index operations.
    Provides a checked API over the graph's bijection and free-index stack.
    """

    def __init__(self, graph):
        self._G = graph

    # ==================== Label <-> index ====================

    def label_to_index(self, label):
        """Map vertex label to matrix row/column index."""
        idx = self._G._map.get_index(label)
        if idx is None:
            raise KeyError(f"Vertex '{label}' not found")
        return idx

    def index_to_label(self, index):
        """Map matrix row/column index to vertex label."""
        if not self._G._map.contains_index(index):
            raise KeyError(f"Index {index} not in use")
        return self._G._map.get_label(index)

    def labels_to_indices(self, labels):
        """Batch convert labels to indices."""
        return [self.label_to_index(v) for v in labels]

    def indices_to_labels(self, indices):
        """Batch convert indices to labels."""
        return [self.index_to_label(i) for i in indices]

    # ==================== Utilities ====================

    def has_label(self, label) -> bool:
        return self._G._map.contains_label(label)

    def has_index(self, index) -> bool:
        return self._G._map.contains_index(index)

    def free_indices(self):
        """Freed indices awaiting reuse, bottom of the stack first."""
        return list(self._G._free)

    def next_index(self) -> int:
        """Index the next successful add_vertex would receive."""
        if self._G._free:
            return self._G._free[-1]
        return self._G._vertex_size

    def stats(self):
        """Get index statistics."""
        used = self._G._map.indices()
        return {
            "n_vertices": self._G._vertex_size,
            "n_edges": self._G._edge_size,
            "capacity": self._G.capacity,
            "n_free": len(self._G._free),
            "max_index": max(used) if used else -1,
        }
