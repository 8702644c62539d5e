# adjgraph/__init__.py
"""adjgraph: adjacency-matrix directed graph with a label/index bijection."""
from __future__ import annotations

from importlib import import_module
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version
from typing import Any

# Lazily exposed submodules (imported on first attribute access)
_lazy_submodules = {
    "core": "adjgraph.core",
    "adapters": "adjgraph.adapters",
    "networkx": "adjgraph.adapters.networkx",
}

# Curated top-level symbols (lazy). name -> (module, attribute)
_lazy_symbols: dict[str, tuple[str, str]] = {
    # Core
    "DirectedGraph": ("adjgraph.core.graph", "DirectedGraph"),
    "Bijection": ("adjgraph.core.bijection", "Bijection"),
    "Edge": ("adjgraph.core.structure", "Edge"),
    "SENTINEL": ("adjgraph.core.structure", "SENTINEL"),
    "DEFAULT_CAPACITY": ("adjgraph.core.structure", "DEFAULT_CAPACITY"),
    "MAX_WEIGHT": ("adjgraph.core.structure", "MAX_WEIGHT"),

    # NetworkX adapter (optional dependency)
    "to_nx": ("adjgraph.adapters.networkx", "to_nx"),
    "from_nx": ("adjgraph.adapters.networkx", "from_nx"),
}

__all__ = sorted(set(list(_lazy_submodules) + list(_lazy_symbols)))


def __getattr__(name: str) -> Any:  # PEP 562: lazy attribute resolution
    if name in _lazy_submodules:
        return import_module(_lazy_submodules[name])
    if name in _lazy_symbols:
        mod, attr = _lazy_symbols[name]
        return getattr(import_module(mod), attr)
    raise AttributeError(name)


def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + list(__all__))


try:
    __version__ = _pkg_version("adjgraph")
except PackageNotFoundError:
    __version__ = "0.0.0"
