"""Configuration loading, derived settings, and filesystem locations."""
