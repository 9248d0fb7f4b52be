"""YAML configuration and the typed sections built from it."""
