"""
Dash demo: renders a GraphModel with Cytoscape and drives the relaxation.

The interval component is the animation clock; each tick calls
RelaxationEngine.step once and redraws the preset positions. Layout logic
stays in the engine.

    python -m resgraph.app
"""

import base64
import json
import logging

from dash import ctx, dcc, html, no_update
from dash_extensions.enrich import DashProxy, Input, Output, State, Trigger, TriggerTransform
import dash_cytoscape as cyto

from .config import LayoutConfig, get_preset
from .errors import GraphError
from .loader import graph_from_record, grid_record
from .relaxation import RelaxationEngine

logger = logging.getLogger(__name__)

TICK_MS = 50
PROPAGATE_ITERATIONS = 200

SAMPLES = {
    "show-3x5": (3, 5),
    "show-10x11": (10, 11),
}


class DemoSession:
    """The graph on screen and the engine laying it out."""

    def __init__(self, config: LayoutConfig):
        self.config = config
        self.graph = None
        self.engine = None

    def load(self, record):
        graph = graph_from_record(record, self.config)
        self.graph = graph
        self.engine = RelaxationEngine(self.config)
        self.engine.step(self.graph)
        return graph

    def tick(self):
        if self.graph is not None:
            self.engine.step(self.graph)

    def toggle_pin(self, node_id):
        node = self.graph.node(node_id)
        if node.fixed:
            self.graph.release_position(node_id)
        else:
            self.graph.pin_position(node_id, node.x, node.y)

    def propagate(self):
        """Pin the first node at 1 and the last at 0, then spread values."""
        ids = list(self.graph.nodes)
        if not ids:
            return
        self.graph.reset_values()
        self.graph.set_value(ids[0], 1.0)
        if len(ids) > 1:
            self.graph.set_value(ids[-1], 0.0)
        self.engine.propagate(self.graph, PROPAGATE_ITERATIONS)


def decode_upload(contents):
    """Parse a dcc.Upload data URL holding a JSON graph record."""
    _, _, payload = contents.partition(",")
    return json.loads(base64.b64decode(payload).decode("utf-8"))


def build_elements(graph):
    """Cytoscape elements for the current positions and values."""
    if graph is None:
        return []
    cy_nodes = [{
        'data': {
            'id': node.id,
            'label': f"{node.id} ({node.value:.2f})",
            'value': node.value,
        },
        'position': {'x': node.x or 0.0, 'y': node.y or 0.0},
        'classes': ' '.join(c for c, on in (('terminal', node.terminal), ('fixed', node.fixed)) if on),
    } for node in graph]

    cy_edges = []
    seen = set()
    for i, edge in enumerate(graph.edges()):
        key = (edge.source, edge.target) if graph.directed else frozenset((edge.source, edge.target))
        if key in seen:
            continue
        seen.add(key)
        cy_edges.append({
            'data': {
                'id': f"{edge.source}->{edge.target}#{i}",
                'source': edge.source,
                'target': edge.target,
                'weight': edge.weight,
                'distance': edge.distance,
            }
        })
    return cy_nodes + cy_edges


STYLESHEET = [
    {'selector': 'node', 'style': {
        'label': 'data(label)', 'font-size': 8, 'width': 16, 'height': 16,
        'background-color': 'mapData(value, 0, 1, #4682B4, #DC143C)'}},
    {'selector': '.terminal', 'style': {'border-width': 3, 'border-color': '#000000'}},
    {'selector': '.fixed', 'style': {'shape': 'square'}},
    {'selector': 'edge', 'style': {'curve-style': 'bezier', 'width': 1, 'line-color': '#999999'}},
]

button_style = {
    "backgroundColor": "#007BFF",
    "color": "white",
    "border": "none",
    "padding": "8px 14px",
    "marginRight": "8px",
    "borderRadius": "6px",
    "cursor": "pointer",
}


def create_app(config=None):
    session = DemoSession(config or get_preset("clamped"))
    session.load(grid_record(*SAMPLES["show-3x5"]))

    app = DashProxy(__name__, transforms=[TriggerTransform()])

    app.layout = html.Div([
        html.Div([
            html.Button("3x5 grid", id="show-3x5", n_clicks=0, style=button_style),
            html.Button("10x11 grid", id="show-10x11", n_clicks=0, style=button_style),
            html.Button("Start / stop", id="run-btn", n_clicks=0, style=button_style),
            html.Button("Propagate", id="propagate-btn", n_clicks=0, style=button_style),
            dcc.Upload(html.Button("Upload JSON", style=button_style), id="upload"),
        ], style={"display": "flex", "padding": "10px"}),
        html.Div(id="status", style={"padding": "0 10px", "fontFamily": "monospace"}),
        cyto.Cytoscape(
            id='cytoscape-network',
            elements=build_elements(session.graph),
            layout={'name': 'preset'},
            style={'width': '100%', 'height': '80vh'},
            stylesheet=STYLESHEET,
            userZoomingEnabled=True,
            userPanningEnabled=True,
        ),
        dcc.Interval(id="tick", interval=TICK_MS, disabled=True),
    ])

    @app.callback(
        Output("tick", "disabled"),
        Input("run-btn", "n_clicks"),
        prevent_initial_call=True
    )
    def toggle_running(n_clicks):
        # odd clicks run, even clicks stop
        return n_clicks % 2 == 0

    @app.callback(
        Output("cytoscape-network", "elements"),
        Output("status", "children"),
        Trigger("tick", "n_intervals"),
        Trigger("show-3x5", "n_clicks"),
        Trigger("show-10x11", "n_clicks"),
        Trigger("propagate-btn", "n_clicks"),
        Input("upload", "contents"),
        Input("cytoscape-network", "tapNodeData"),
        State("upload", "filename"),
        prevent_initial_call=True
    )
    def update(contents, node_data, filename):
        trigger = ctx.triggered_id
        status = no_update
        try:
            if trigger in SAMPLES:
                session.load(grid_record(*SAMPLES[trigger]))
                status = f"Loaded {trigger[5:]} grid"
            elif trigger == "upload" and contents:
                session.load(decode_upload(contents))
                status = f"Loaded {filename}"
            elif trigger == "propagate-btn":
                session.propagate()
                status = "Values propagated"
            elif trigger == "cytoscape-network" and node_data:
                session.toggle_pin(node_data['id'])
            else:
                session.tick()
        except (GraphError, ValueError) as exc:
            logger.warning("demo action %s failed: %s", trigger, exc)
            status = f"Error: {exc}"
        return build_elements(session.graph), status

    return app


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    create_app().run(debug=True)
