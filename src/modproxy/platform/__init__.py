"""Infrastructure adapters: logging and the module proxy client."""
