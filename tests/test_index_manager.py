import unittest

from adjgraph.core.graph import DirectedGraph


class TestIndexManager(unittest.TestCase):

    def setUp(self):
        g = DirectedGraph(initial_capacity=4)
        g.add_vertices(["A", "B", "C"])
        g.add_edge("A", "B", 1)
        self.g = g

    def test_label_index_roundtrip(self):
        idx = self.g.idx
        self.assertEqual(idx.labels_to_indices(["A", "B", "C"]), [0, 1, 2])
        self.assertEqual(idx.indices_to_labels([2, 0]), ["C", "A"])

    def test_unknown_keys_raise(self):
        with self.assertRaises(KeyError):
            self.g.idx.label_to_index("Z")
        with self.assertRaises(KeyError):
            self.g.idx.index_to_label(3)
        self.assertFalse(self.g.idx.has_label("Z"))
        self.assertFalse(self.g.idx.has_index(3))

    def test_next_index_follows_free_stack(self):
        self.assertEqual(self.g.idx.next_index(), 3)
        self.g.remove_vertex("B")
        self.assertEqual(self.g.idx.free_indices(), [1])
        self.assertEqual(self.g.idx.next_index(), 1)
        self.assertFalse(self.g.idx.has_index(1))

    def test_stats(self):
        self.g.remove_vertex("C")
        stats = self.g.idx.stats()
        self.assertEqual(stats, {
            "n_vertices": 2,
            "n_edges": 1,
            "capacity": 4,
            "n_free": 1,
            "max_index": 1,
        })

    def test_stats_empty(self):
        self.assertEqual(DirectedGraph().idx.stats()["max_index"], -1)


if __name__ == "__main__":
    unittest.main()
