"""Public exception types for formula-deps."""


class FormulaDepsError(Exception):
    """Base class for all formula-deps exceptions."""


class InvalidSelection(FormulaDepsError):
    """Raised when a trace is started without a selected node or attribute."""


class DocumentLoadError(FormulaDepsError):
    """Raised when a document file cannot be loaded or parsed."""


class UnknownNodeError(FormulaDepsError, KeyError):
    """Raised when a node id does not exist in the document."""

    def __init__(self, node_id: str):
        super().__init__(node_id)
        self.node_id = node_id

    def __str__(self) -> str:
        return f"Unknown node id: {self.node_id}"
