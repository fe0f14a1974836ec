"""Flask web server exposing formula dependency tracing for one document."""

import threading
from pathlib import Path
from typing import Optional, Union

from flask import Flask, jsonify, request
from flask_cors import CORS

from ..exceptions import InvalidSelection, UnknownNodeError
from ..graph.references import Direction
from ..model.document import Document
from ..model.elements import element_label
from ..model.loader import load_document
from ..tracing.sinks import Connectors
from ..tracing.tracer import FormulaDependencyTracer
from ..utils.config import config
from ..utils.logger import get_logger

logger = get_logger("server")


def create_app(
    document_path: Optional[Union[str, Path]] = None,
    document: Optional[Document] = None
) -> Flask:
    """Create and configure the Flask application.

    Args:
        document_path: YAML document to serve
        document: Already loaded document, used instead of document_path

    Returns:
        Configured Flask application
    """
    if document is None:
        if document_path is None:
            raise ValueError("Either document_path or document is required")
        document = load_document(document_path)

    app = Flask(__name__, static_folder=None)
    CORS(app)

    app.config["DOCUMENT"] = document
    app.config["REFRESH_COUNT"] = 0

    # One trace step or clear at a time; steps read and replace the shared session
    trace_lock = threading.Lock()

    def on_refresh(_document: Document) -> None:
        app.config["REFRESH_COUNT"] += 1

    document.add_refresh_listener(on_refresh)

    def get_tracer() -> FormulaDependencyTracer:
        """Get the document's tracer, registering a fresh one after a clear."""
        return FormulaDependencyTracer.for_document(app.config["DOCUMENT"])

    def trace_state() -> dict:
        doc = app.config["DOCUMENT"]
        tracer = doc.get_extension(FormulaDependencyTracer)
        session = tracer.session if tracer is not None else None
        connectors = doc.get_extension(Connectors) or []

        return {
            "active": bool(session and session.is_active),
            "direction": session.direction.value if session and session.direction else None,
            "frontier": sorted(element_label(e) for e in session.frontier) if session and session.is_active else [],
            "highlighted": sorted(element_label(e) for e in session.highlighted) if session else [],
            "connectors": [connector.to_dict() for connector in connectors],
            "refresh_count": app.config["REFRESH_COUNT"]
        }

    @app.errorhandler(InvalidSelection)
    def invalid_selection(error):
        return jsonify({"error": str(error)}), 400

    @app.errorhandler(UnknownNodeError)
    def unknown_node(error):
        return jsonify({"error": str(error)}), 404

    # =====================
    # Document Routes
    # =====================

    @app.route("/api/document")
    def get_document():
        """Get the document nodes with their formulas and attributes."""
        doc = app.config["DOCUMENT"]
        nodes = []
        for node in doc.iter_nodes():
            nodes.append({
                "id": node.id,
                "text": node.text,
                "parent": node.parent.id if node.parent else None,
                "is_formula": node.formula is not None,
                "attributes": [
                    {"name": a.name, "value": a.value, "is_formula": a.formula is not None}
                    for a in node.attributes
                ]
            })

        selection = doc.selection
        return jsonify({
            "name": doc.name,
            "nodes": nodes,
            "selection": {
                "node": selection.node.id if selection.node else None,
                "attribute": selection.attribute.name if selection.attribute else None
            }
        })

    @app.route("/api/selection", methods=["POST"])
    def select():
        """Select a node, optionally narrowed to one of its attributes."""
        data = request.get_json(silent=True) or {}
        node_id = data.get("node_id")
        if not node_id:
            return jsonify({"error": "node_id is required"}), 400

        attribute = data.get("attribute")
        try:
            with trace_lock:
                app.config["DOCUMENT"].select(node_id, attribute)
        except UnknownNodeError:
            raise
        except KeyError as e:
            return jsonify({"error": e.args[0]}), 400

        return jsonify({"node": node_id, "attribute": attribute})

    @app.route("/api/selection", methods=["DELETE"])
    def deselect():
        """Clear the selection; the next fresh trace needs a new one."""
        with trace_lock:
            app.config["DOCUMENT"].clear_selection()
        return jsonify({"node": None, "attribute": None})

    # =====================
    # Trace Routes
    # =====================

    @app.route("/api/trace")
    def get_trace():
        """Get the current highlights and connectors."""
        return jsonify(trace_state())

    @app.route("/api/trace/<direction>", methods=["POST"])
    def run_trace(direction: str):
        """Run one precedents or dependents trace step."""
        try:
            trace_direction = Direction(direction)
        except ValueError:
            return jsonify({"error": f"Unknown trace direction: {direction}"}), 404

        with trace_lock:
            tracer = get_tracer()
            if trace_direction is Direction.PRECEDENTS:
                tracer.find_precedents()
            else:
                tracer.find_dependents()
            return jsonify(trace_state())

    @app.route("/api/trace/clear", methods=["POST"])
    def clear_trace():
        """Remove highlights and connectors and end the trace session."""
        with trace_lock:
            tracer = app.config["DOCUMENT"].get_extension(FormulaDependencyTracer)
            if tracer is not None:
                tracer.clear()
            return jsonify(trace_state())

    return app


def run_server(
    document_path: Union[str, Path],
    host: Optional[str] = None,
    port: Optional[int] = None
):
    """Run the development server."""
    host = host or config.get("server.host", "127.0.0.1")
    port = port or int(config.get("server.port", 5000))
    app = create_app(document_path)
    logger.info(f"Starting server at http://{host}:{port}")
    logger.info(f"Serving: {document_path}")
    app.run(host=host, port=port, debug=True, threaded=True, use_reloader=False)
