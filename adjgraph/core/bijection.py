class Bijection:
    """
    Two-way mapping between hashable vertex labels and dense integer indices.

    Both directions are plain dicts and are always updated together, so for
    every stored pair ``(label, index)`` we have ``forward[label] == index`` and
    ``backward[index] == label``.

    Notes
    -----
    - ``add`` does not check for collisions. Callers are expected to test
      ``contains_label`` first; overwriting an existing label or index leaves
      the stale partner behind.
    - Labels must support ``__hash__`` and ``__eq__``.
    """

    def __init__(self):
        self._label_to_idx = {}  # label -> index
        self._idx_to_label = {}  # index -> label

    def add(self, label, index):
        """
        Register ``label <-> index`` in both directions.

        Parameters
        ----------
        label : hashable
        index : int
        """
        self._label_to_idx[label] = index
        self._idx_to_label[index] = label

    def get_index(self, label):
        """Index for ``label``, or ``None`` if the label is unknown."""
        return self._label_to_idx.get(label)

    def get_label(self, index):
        """Label for ``index``, or ``None`` if the index is not mapped."""
        return self._idx_to_label.get(index)

    def contains_label(self, label) -> bool:
        return label in self._label_to_idx

    def contains_index(self, index) -> bool:
        return index in self._idx_to_label

    def remove_by_label(self, label) -> bool:
        """
        Drop ``label`` and its index from both directions.

        Parameters
        ----------
        label : hashable

        Returns
        -------
        bool
            True if something was removed, False if the label was not mapped.
        """
        if label not in self._label_to_idx:
            return False
        idx = self._label_to_idx.pop(label)
        del self._idx_to_label[idx]
        return True

    def clear(self):
        self._label_to_idx.clear()
        self._idx_to_label.clear()

    def labels(self):
        """Set copy of all mapped labels."""
        return set(self._label_to_idx)

    def indices(self):
        """Set copy of all mapped indices."""
        return set(self._idx_to_label)

    def items(self):
        """List of ``(label, index)`` pairs sorted by index."""
        return sorted(self._label_to_idx.items(), key=lambda kv: kv[1])

    def __len__(self):
        return len(self._label_to_idx)

    def __contains__(self, label):
        return label in self._label_to_idx

    def __iter__(self):
        return iter(list(self._label_to_idx))

    def __repr__(self):
        pairs = ", ".join(f"{label!r}: {idx}" for label, idx in self.items())
        return f"Bijection({{{pairs}}})"
