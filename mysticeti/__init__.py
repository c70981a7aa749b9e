"""Building blocks for a DAG-based consensus validator and its benchmark orchestrator."""

__version__ = "0.1.0"

__all__ = [
    "display",
    "errors",
    "faults",
    "instance",
    "logs",
    "stat",
    "transactions",
    "types",
    "vultr",
]