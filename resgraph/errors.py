"""
Errors raised by the graph model and the relaxation engine.

All of them are precondition violations on the caller's data: they are raised
as soon as they are detected and never retried.
"""


class GraphError(Exception):
    """Base class for every error raised by resgraph."""


class NodeNotFound(GraphError, KeyError):
    """A node id was referenced that the model does not contain."""

    def __init__(self, node_id, context=None):
        self.node_id = node_id
        self.context = context
        message = f"unknown node '{node_id}'"
        if context:
            message = f"{context}: {message}"
        super().__init__(message)

    def __str__(self):
        # KeyError would otherwise repr() the message
        return self.args[0]


class ParseError(GraphError, ValueError):
    """A graph record or one of its numeric fields could not be parsed."""


class DegenerateNode(GraphError):
    """A free node has no neighbours, so its mean value is undefined."""

    def __init__(self, node_id):
        self.node_id = node_id
        super().__init__(
            f"node '{node_id}' has no neighbours and is not terminal; "
            "its propagated value would be NaN"
        )
