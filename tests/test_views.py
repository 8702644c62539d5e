import unittest

import numpy as np
import polars as pl
import scipy.sparse as sp

from adjgraph.core.graph import DirectedGraph
from adjgraph.core.structure import SENTINEL


def _build_graph() -> DirectedGraph:
    g = DirectedGraph()
    g.add_vertices(["A", "B", "C"])
    g.add_edge("A", "B", 5)
    g.add_edge("B", "C", 0)
    g.add_edge("C", "A", 2)
    return g


class TestAdjacencyMatrix(unittest.TestCase):

    def setUp(self):
        self.g = _build_graph()

    def test_dense(self):
        labels, M = self.g.adjacency_matrix()
        self.assertEqual(labels, ["A", "B", "C"])
        self.assertEqual(M.shape, (3, 3))
        self.assertEqual(M[0, 1], 5)
        self.assertEqual(M[2, 0], 2)
        self.assertEqual(M[1, 0], 0)
        self.assertFalse((M == SENTINEL).any())

    def test_raw_keeps_sentinel(self):
        _, M = self.g.adjacency_matrix(raw=True)
        self.assertEqual(M[1, 0], SENTINEL)
        self.assertEqual(M[1, 2], 0)

    def test_sparse(self):
        labels, M = self.g.adjacency_matrix(sparse=True)
        self.assertTrue(sp.issparse(M))
        # the zero-weight edge B->C is not stored
        self.assertEqual(M.nnz, 2)
        self.assertEqual(M.toarray()[0, 1], 5)

    def test_copy_does_not_alias(self):
        _, M = self.g.adjacency_matrix(raw=True)
        M[0, 1] = 99
        self.assertEqual(self.g.edge_weight("A", "B"), 5)

    def test_follows_index_order_after_reuse(self):
        self.g.remove_vertex("A")
        self.g.add_vertex("D")  # takes index 0
        labels, M = self.g.adjacency_matrix(raw=True)
        self.assertEqual(labels, ["D", "B", "C"])
        self.assertTrue(np.all(M[0, :] == SENTINEL))
        self.assertTrue(np.all(M[:, 0] == SENTINEL))

    def test_empty(self):
        labels, M = DirectedGraph().adjacency_matrix()
        self.assertEqual(labels, [])
        self.assertEqual(M.shape, (0, 0))


class TestTableViews(unittest.TestCase):

    def test_edges_view(self):
        df = _build_graph().edges_view()
        self.assertIsInstance(df, pl.DataFrame)
        self.assertEqual(df.columns, ["source", "destination", "weight"])
        self.assertEqual(df.height, 3)
        rows = set(df.iter_rows())
        self.assertEqual(rows, {("A", "B", 5), ("B", "C", 0), ("C", "A", 2)})

    def test_vertices_view(self):
        g = _build_graph()
        g.remove_vertex("B")
        df = g.vertices_view()
        self.assertEqual(df["vertex"].to_list(), ["A", "C"])
        self.assertEqual(df["index"].to_list(), [0, 2])

    def test_mixed_label_types(self):
        g = DirectedGraph()
        g.add_vertices([1, "a", ("t", 2)])
        g.add_edge(1, "a", 3)
        g.add_edge(("t", 2), 1, 4)

        vdf = g.vertices_view()
        self.assertEqual(vdf["vertex"].dtype, pl.Object)
        self.assertEqual(vdf["vertex"].to_list(), [1, "a", ("t", 2)])
        self.assertEqual(vdf["index"].to_list(), [0, 1, 2])

        edf = g.edges_view()
        self.assertEqual(edf.height, 2)
        self.assertEqual(edf["source"].to_list(), [1, ("t", 2)])
        self.assertEqual(edf["destination"].to_list(), ["a", 1])
        self.assertEqual(edf["weight"].to_list(), [3, 4])

        hdf = g.history(as_df=True)
        self.assertEqual(hdf.height, 5)
        self.assertEqual(hdf["op"].to_list(), ["add_vertex"] * 3 + ["add_edge"] * 2)

    def test_single_type_labels_stay_native(self):
        g = DirectedGraph()
        g.add_vertices([10, 20])
        self.assertEqual(g.vertices_view()["vertex"].dtype, pl.Int64)
        g.add_edge(10, 20, 1)
        self.assertEqual(g.edges_view()["source"].dtype, pl.Int64)

    def test_empty_views_have_schema(self):
        g = DirectedGraph()
        self.assertEqual(g.edges_view().columns, ["source", "destination", "weight"])
        self.assertEqual(g.edges_view().height, 0)
        self.assertEqual(g.vertices_view().columns, ["vertex", "index"])


if __name__ == "__main__":
    unittest.main()
