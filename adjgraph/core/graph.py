import logging
import numbers
import time
import inspect
from datetime import datetime, timezone
from functools import wraps

import numpy as np
import scipy.sparse as sp
import polars as pl

from .bijection import Bijection
from .structure import Edge, SENTINEL, DEFAULT_CAPACITY, MAX_WEIGHT
from ._index import IndexManager
from ._state import _State

logger = logging.getLogger(__name__)


def _frame(rows):
    """
    INTERNAL: Build a Polars DF from a list of row dicts.

    Missing keys become nulls. A column whose non-null values share one Python
    type is inferred as usual; a column mixing types (e.g. int and str vertex
    labels), or holding values polars cannot map, is stored as ``pl.Object``.
    """
    keys = list(dict.fromkeys(k for row in rows for k in row))
    series = []
    for key in keys:
        values = [row.get(key) for row in rows]
        kinds = {type(v) for v in values if v is not None}
        if len(kinds) <= 1:
            try:
                series.append(pl.Series(key, values))
                continue
            except (TypeError, ValueError, pl.exceptions.PolarsError):
                pass
        series.append(pl.Series(key, values, dtype=pl.Object))
    return pl.DataFrame(series)


class DirectedGraph:
    """
    Directed, weighted graph backed by a square adjacency matrix.

    Vertices are arbitrary hashable labels. Each live vertex owns a dense integer
    index (row and column of the matrix) handed out by a bijection. Indices freed
    by ``remove_vertex`` are pushed on a stack and reused LIFO by later inserts.

    Parameters
    ----------
    initial_capacity : int, optional
        Number of rows/columns allocated up front. Must be positive.
    history : bool, optional
        Record mutating calls in the in-memory history log.

    Notes
    -----
    - Cell ``(i, j)`` holds the weight of edge ``i -> j`` or ``SENTINEL`` (-1).
      A weight of 0 is a real edge.
    - The matrix grows by doubling and never shrinks, not even on ``clear``.
    - Removing a vertex wipes its row and column, so a recycled index never
      inherits edges from the vertex that held it before.
    - Not thread-safe.

    See Also
    --------
    add_vertex, add_edge, remove_vertex, edges, history
    """

    def __init__(self, initial_capacity=DEFAULT_CAPACITY, history=True):
        if isinstance(initial_capacity, bool) or not isinstance(initial_capacity, numbers.Integral):
            raise TypeError(f"initial_capacity must be an int, got {type(initial_capacity).__name__}")
        if initial_capacity < 1:
            raise ValueError(f"initial_capacity must be positive, got {initial_capacity}")

        self._map = Bijection()   # label <-> index
        self._free = []           # freed indices, top of stack at the end
        self._matrix = np.full((int(initial_capacity), int(initial_capacity)), SENTINEL, dtype=np.int64)
        self._vertex_size = 0
        self._edge_size = 0

        self._state = _State()

        # History
        self._history_enabled = bool(history)
        self._history = []           # list[dict]
        self._history_clock0 = time.perf_counter_ns()
        self._install_history_hooks()  # wrap mutating methods

    # Matrix management

    @property
    def capacity(self):
        """Current number of rows (= columns) in the adjacency matrix."""
        return self._matrix.shape[0]

    def _grow(self):
        """
        INTERNAL: Double the matrix, keeping existing weights in the top-left block.

        Notes
        -----
        - New cells are initialised to ``SENTINEL``.
        """
        old = self._matrix
        size = old.shape[0]
        self._matrix = np.full((size * 2, size * 2), SENTINEL, dtype=np.int64)
        self._matrix[:size, :size] = old
        logger.debug("Grew adjacency matrix from %d to %d", size, size * 2)

    def _next_index(self):
        if self._free:
            idx = self._free.pop()
            logger.debug("Reusing freed index %d", idx)
            return idx
        return self._vertex_size

    @staticmethod
    def _check_weight(weight):
        if isinstance(weight, bool) or not isinstance(weight, numbers.Integral):
            raise TypeError(f"Edge weight must be an int, got {type(weight).__name__}")
        if weight < 0:
            raise ValueError("Edge weight cannot be negative")
        if weight > MAX_WEIGHT:
            raise ValueError(f"Edge weight cannot exceed {MAX_WEIGHT}")

    def _cell(self, source, destination):
        """
        INTERNAL: Resolve both endpoints to a matrix cell.

        Returns
        -------
        tuple[int, int] or None
            ``(row, col)``, or None if either label is unknown.
        """
        i = self._map.get_index(source)
        j = self._map.get_index(destination)
        if i is None or j is None:
            return None
        return i, j

    # Build graph

    def add_vertex(self, vertex):
        """
        Add a vertex. Existing vertices are left untouched.

        Parameters
        ----------
        vertex : hashable
            Vertex label.

        Returns
        -------
        bool
            True if the vertex was added, False if it was already present.

        Notes
        -----
        - Takes the most recently freed index if any, otherwise the next dense slot.
        - Grows the adjacency matrix if that index is out of range.
        """
        if self._map.contains_label(vertex):
            return False
        idx = self._next_index()
        while idx >= self.capacity:
            self._grow()
        self._map.add(vertex, idx)
        self._vertex_size += 1
        self._state.bump()
        return True

    def add_vertices(self, vertices):
        """
        Add several vertices.

        Parameters
        ----------
        vertices : Iterable[hashable]

        Returns
        -------
        int
            Number of vertices actually added (duplicates are skipped).
        """
        return sum(1 for v in vertices if self.add_vertex(v))

    def add_edge(self, source, destination, weight):
        """
        Add a directed edge ``source -> destination``.

        Parameters
        ----------
        source : hashable
        destination : hashable
        weight : int
            Non-negative weight; 0 is allowed.

        Returns
        -------
        bool
            True if the edge was added. False if it already exists or an endpoint
            is not a vertex of the graph.

        Raises
        ------
        TypeError
            If ``weight`` is not an integer.
        ValueError
            If ``weight`` is negative or larger than ``MAX_WEIGHT``.
        """
        self._check_weight(weight)
        cell = self._cell(source, destination)
        if cell is None or self._matrix[cell] != SENTINEL:
            return False
        self._matrix[cell] = int(weight)
        self._edge_size += 1
        self._state.bump()
        return True

    # Remove

    def remove_vertex(self, vertex):
        """
        Remove a vertex together with every edge touching it.

        Parameters
        ----------
        vertex : hashable

        Returns
        -------
        bool
            True if the vertex was found and removed, otherwise False.

        Notes
        -----
        - The row and column of the vertex are reset to ``SENTINEL`` and
          ``edge_size`` drops by the number of edges cleared.
        - The freed index goes on top of the free stack.
        """
        idx = self._map.get_index(vertex)
        if idx is None:
            return False
        out_mask = self._matrix[idx, :] != SENTINEL
        in_mask = self._matrix[:, idx] != SENTINEL
        cleared = int(out_mask.sum()) + int(in_mask.sum()) - int(out_mask[idx])
        self._matrix[idx, :] = SENTINEL
        self._matrix[:, idx] = SENTINEL
        self._edge_size -= cleared

        self._free.append(idx)
        self._vertex_size -= 1
        self._map.remove_by_label(vertex)
        self._state.bump()
        return True

    def remove_edge(self, source, destination):
        """
        Remove the edge ``source -> destination``.

        Returns
        -------
        bool
            True if the edge was found and removed, otherwise False.
        """
        cell = self._cell(source, destination)
        if cell is None or self._matrix[cell] == SENTINEL:
            return False
        self._matrix[cell] = SENTINEL
        self._edge_size -= 1
        self._state.bump()
        return True

    def clear(self):
        """
        Remove all vertices and edges.

        Notes
        -----
        The matrix keeps its current capacity.
        """
        self._map.clear()
        self._free.clear()
        self._matrix.fill(SENTINEL)
        self._vertex_size = 0
        self._edge_size = 0
        self._state.bump()

    # Queries

    def vertex_size(self):
        return self._vertex_size

    def edge_size(self):
        return self._edge_size

    def contains_vertex(self, vertex):
        return self._map.contains_label(vertex)

    def contains_edge(self, source, destination):
        """True if both endpoints exist and the edge ``source -> destination`` is set."""
        cell = self._cell(source, destination)
        if cell is None:
            return False
        return bool(self._matrix[cell] != SENTINEL)

    def edge_weight(self, source, destination):
        """
        Weight of ``source -> destination``.

        Returns
        -------
        int
            The stored weight, or ``SENTINEL`` (-1) if the edge or either
            endpoint is missing. Use ``contains_edge`` to tell the cases apart.
        """
        cell = self._cell(source, destination)
        if cell is None:
            return SENTINEL
        return int(self._matrix[cell])

    def vertices(self):
        """Set of all vertex labels."""
        return self._map.labels()

    def edges(self):
        """
        Set of all edges as ``Edge(source, destination, weight)``.

        Notes
        -----
        Scans the full matrix. Cells whose row or column does not resolve to a
        live vertex are skipped.
        """
        out = set()
        rows, cols = np.nonzero(self._matrix != SENTINEL)
        for i, j in zip(rows.tolist(), cols.tolist()):
            if not (self._map.contains_index(i) and self._map.contains_index(j)):
                continue
            out.add(Edge(self._map.get_label(i), self._map.get_label(j), int(self._matrix[i, j])))
        return out

    def successors(self, vertex):
        """
        Labels reachable from ``vertex`` over one outgoing edge.

        Raises
        ------
        KeyError
            If the vertex is not found.
        """
        i = self.idx.label_to_index(vertex)
        cols = np.nonzero(self._matrix[i, :] != SENTINEL)[0]
        return {self._map.get_label(j) for j in cols.tolist() if self._map.contains_index(j)}

    def predecessors(self, vertex):
        """
        Labels with an edge into ``vertex``.

        Raises
        ------
        KeyError
            If the vertex is not found.
        """
        j = self.idx.label_to_index(vertex)
        rows = np.nonzero(self._matrix[:, j] != SENTINEL)[0]
        return {self._map.get_label(i) for i in rows.tolist() if self._map.contains_index(i)}

    @property
    def idx(self):
        """Checked label/index lookups (see ``IndexManager``)."""
        if not hasattr(self, "_idx_manager"):
            self._idx_manager = IndexManager(self)
        return self._idx_manager

    @property
    def shape(self):
        """``(vertex_size, edge_size)``."""
        return (self._vertex_size, self._edge_size)

    def __len__(self):
        return self._vertex_size

    def __contains__(self, vertex):
        return self._map.contains_label(vertex)

    # Matrix and tabular views

    def adjacency_matrix(self, sparse=False, raw=False):
        """
        Return the adjacency matrix restricted to live vertices.

        Parameters
        ----------
        sparse : bool, optional (default=False)
            Return a SciPy CSR matrix instead of a dense NumPy array.
        raw : bool, optional (default=False)
            Keep ``SENTINEL`` for absent edges instead of mapping them to 0.
            Ignored when ``sparse=True``.

        Returns
        -------
        tuple[list, numpy.ndarray | scipy.sparse.csr_matrix]
            ``(labels, M)`` where ``labels[k]`` is the vertex of row/column ``k``,
            ordered by internal index.

        Notes
        -----
        - With ``raw=False`` an edge of weight 0 looks the same as no edge; use
          ``raw=True`` or ``edges()`` when zero weights matter.
        - The result is a copy; mutating it does not touch the graph.
        """
        pairs = self._map.items()
        labels = [label for label, _ in pairs]
        order = np.array([i for _, i in pairs], dtype=np.intp)
        M = self._matrix[np.ix_(order, order)].copy()
        if sparse:
            return labels, sp.csr_matrix(np.where(M == SENTINEL, 0, M))
        if not raw:
            M[M == SENTINEL] = 0
        return labels, M

    def edges_view(self):
        """
        Build a Polars DF view of edges.

        Returns
        -------
        polars.DataFrame
            Columns ``source``, ``destination``, ``weight``, sorted by the internal
            index of source then destination.
        """
        rows = []
        r, c = np.nonzero(self._matrix != SENTINEL)
        for i, j in sorted(zip(r.tolist(), c.tolist())):
            if not (self._map.contains_index(i) and self._map.contains_index(j)):
                continue
            rows.append({
                "source": self._map.get_label(i),
                "destination": self._map.get_label(j),
                "weight": int(self._matrix[i, j]),
            })
        if not rows:
            return pl.DataFrame(schema={"source": pl.Utf8, "destination": pl.Utf8, "weight": pl.Int64})
        return _frame(rows)

    def vertices_view(self):
        """
        Read-only vertex table.

        Returns
        -------
        polars.DataFrame
            Columns ``vertex`` and ``index``, sorted by index.

        Notes
        -----
        Labels of a single Python type give a native column (``Utf8``, ``Int64``,
        ...). Mixed label types, or types polars cannot map, give an ``Object``
        column holding the labels unchanged.
        """
        pairs = self._map.items()
        if not pairs:
            return pl.DataFrame(schema={"vertex": pl.Utf8, "index": pl.Int64})
        return _frame([{"vertex": label, "index": i} for label, i in pairs])

    # Interop

    def to_nx(self):
        """
        NetworkX ``DiGraph`` of this graph.

        Notes
        -----
        The conversion is cached until the next mutation; every call returns a
        fresh copy of the cached graph, so edits to it never reach later calls.
        Requires the optional ``networkx`` dependency.
        """
        nxG = self._state.cached("nx")
        if nxG is None:
            from ..adapters.networkx import to_nx
            nxG = self._state.store("nx", to_nx(self))
        return nxG.copy()

    # History and Timeline

    def _jsonify(self, x):
        # Make args/return JSON-safe & compact.
        if x is None or isinstance(x, (bool, int, float, str)):
            return x
        if isinstance(x, (set, frozenset)):
            return sorted((self._jsonify(v) for v in x), key=repr)
        if isinstance(x, (list, tuple)):
            return [self._jsonify(v) for v in x]
        if isinstance(x, dict):
            return {str(k): self._jsonify(v) for k, v in x.items()}
        # NumPy scalars
        if isinstance(x, np.generic):
            return x.item()
        return repr(x)

    def _log_event(self, op: str, **fields):
        if not self._history_enabled:
            return
        stamp = datetime.now(timezone.utc).isoformat(timespec="microseconds")
        evt = {
            "version": self._state.version,
            "ts_utc": stamp.replace("+00:00", "Z"),
            "mono_ns": time.perf_counter_ns() - self._history_clock0,
            "op": op,
        }
        evt.update((k, self._jsonify(v)) for k, v in fields.items())
        self._history.append(evt)

    def _recorded(self, fn):
        """
        INTERNAL: Wrap a mutator so each call lands in the history.

        Besides the call arguments and the result, the event carries the matrix
        slot the call touched (``index`` for vertex calls, ``row``/``col`` for
        edge calls, resolved before the call so removals still report it) and
        the change in both counters (``d_vertices``, ``d_edges``).
        """
        sig = inspect.signature(fn)

        @wraps(fn)
        def wrapper(*args, **kwargs):
            call = dict(sig.bind(*args, **kwargs).arguments)
            slot = {}
            if "vertex" in call:
                slot["index"] = self._map.get_index(call["vertex"])
            elif "source" in call:
                slot["row"] = self._map.get_index(call["source"])
                slot["col"] = self._map.get_index(call["destination"])
            n_v, n_e = self._vertex_size, self._edge_size

            result = fn(*args, **kwargs)

            if slot.get("index", 0) is None:
                # freshly added vertex: report the index it was given
                slot["index"] = self._map.get_index(call["vertex"])
            self._log_event(
                fn.__name__, **call, **slot, result=result,
                d_vertices=self._vertex_size - n_v, d_edges=self._edge_size - n_e,
            )
            return result
        return wrapper

    def _install_history_hooks(self):
        # Every public mutator; add_vertices goes through add_vertex.
        for name in ("add_vertex", "add_edge", "remove_vertex", "remove_edge", "clear"):
            fn = getattr(self, name)
            if getattr(fn, "__wrapped__", None) is None:
                setattr(self, name, self._recorded(fn))

    def history(self, as_df: bool = False):
        """
        Return the append-only mutation history.

        Parameters
        ----------
        as_df : bool, default False
            If True, return a Polars DF [DataFrame]; otherwise return a list of dicts.

        Returns
        -------
        list[dict] or polars.DataFrame
            Each event includes: 'version' (graph version after the call),
            'ts_utc' (ISO-8601, UTC), 'mono_ns' (monotonic nanoseconds since the
            graph was created), 'op', the call arguments, the touched matrix slot
            ('index' or 'row'/'col'), 'result', and the counter deltas
            'd_vertices'/'d_edges'.

        Notes
        -----
        Calls that changed nothing are recorded too; their 'version' equals the
        previous event's and both deltas are 0. Ordering is guaranteed by 'mono_ns'.
        With ``as_df=True``, columns whose values mix Python types (e.g. int and
        str labels) come back as ``Object``.
        """
        if as_df:
            return _frame(self._history) if self._history else pl.DataFrame()
        return [dict(evt) for evt in self._history]

    def enable_history(self, flag: bool = True):
        """Start (True) or pause (False) recording mutations."""
        self._history_enabled = bool(flag)

    def clear_history(self):
        self._history.clear()

    def mark(self, label: str):
        """
        Insert a manual marker into the mutation history.

        Parameters
        ----------
        label : str
            Human-readable tag for the marker event.

        Notes
        -----
        Recorded with 'op'='mark'. Nothing is recorded while history is paused.
        """
        self._log_event("mark", label=label)

    # Debug

    def __repr__(self):
        mapping = ", ".join(f"{label!r}: {i}" for label, i in self._map.items())
        return (
            f"DirectedGraph(vertex_size={self._vertex_size}, edge_size={self._edge_size}, "
            f"capacity={self.capacity}, free={self._free}, map={{{mapping}}})"
        )
