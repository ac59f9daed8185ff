"""Resource types, an in-memory store and reconcilers for SBOM and vulnerability workflows."""

__version__ = "0.1.0"

__all__ = ["client", "controller", "logs", "resources", "scheme", "version"]