"""
resgraph: value propagation and distance relaxation on small graphs.
"""

from .config import Bounds, LayoutConfig, PRESETS, get_preset
from .errors import DegenerateNode, GraphError, NodeNotFound, ParseError
from .graph import Edge, GraphModel, Node
from .relaxation import LayoutState, RelaxationEngine

__all__ = [
    "Bounds",
    "DegenerateNode",
    "Edge",
    "GraphError",
    "GraphModel",
    "LayoutConfig",
    "LayoutState",
    "Node",
    "NodeNotFound",
    "PRESETS",
    "ParseError",
    "RelaxationEngine",
    "get_preset",
]

__version__ = "0.1.0"
