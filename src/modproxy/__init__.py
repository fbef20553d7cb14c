"""modproxy: a read-only client for the module proxy protocol."""

__version__ = "0.1.0"

__all__ = ["__version__"]
