"""alias-graph: SCC engine and circular type alias detection."""

__version__ = "0.1.0"
