"""A minimal Linux container runtime built on namespaces and pivot_root."""

__version__ = "0.1.0"