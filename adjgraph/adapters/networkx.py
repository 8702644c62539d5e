try:
    import networkx as nx
except ModuleNotFoundError as e:
    raise ModuleNotFoundError(
        "Optional dependency 'networkx' is not installed. "
        "Install with: pip install adjgraph[networkx]"
    ) from e

from ..core.graph import DirectedGraph


def _coerce_weight(w):
    # NetworkX stores weights as floats more often than not; accept 2.0 but not 2.5.
    if isinstance(w, float) and w.is_integer():
        return int(w)
    return w


def to_nx(graph: DirectedGraph) -> "nx.DiGraph":
    """
    Export a DirectedGraph to a NetworkX DiGraph.

    Parameters
    ----------
    graph : DirectedGraph
        Source graph instance.

    Returns
    -------
    networkx.DiGraph
        One node per vertex label and one edge per stored edge, with the weight
        under the ``weight`` attribute.
    """
    G = nx.DiGraph()
    G.add_nodes_from(graph.vertices())
    for e in graph.edges():
        G.add_edge(e.source, e.destination, weight=e.weight)
    return G


def from_nx(nxG, weight: str = "weight", default_weight: int = 1, initial_capacity=None) -> DirectedGraph:
    """
    Build a DirectedGraph from any NetworkX graph.

    Parameters
    ----------
    nxG : networkx.Graph | networkx.DiGraph | networkx.MultiGraph | networkx.MultiDiGraph
    weight : str
        Edge attribute holding the weight.
    default_weight : int
        Weight for edges without the attribute.
    initial_capacity : int, optional
        Defaults to the number of nodes (at least 1), so no growth happens while loading.

    Returns
    -------
    DirectedGraph

    Raises
    ------
    TypeError
        If a weight is not integral.
    ValueError
        If a weight is negative.

    Notes
    -----
    - Undirected inputs produce both directions for every edge.
    - Parallel edges of multigraphs collapse; the first one seen wins.
    """
    if initial_capacity is None:
        initial_capacity = max(1, nxG.number_of_nodes())
    g = DirectedGraph(initial_capacity=initial_capacity)
    g.add_vertices(nxG.nodes())

    directed = nxG.is_directed()
    for u, v, data in nxG.edges(data=True):
        w = _coerce_weight(data.get(weight, default_weight))
        g.add_edge(u, v, w)
        if not directed:
            g.add_edge(v, u, w)
    return g


__all__ = ["to_nx", "from_nx"]
