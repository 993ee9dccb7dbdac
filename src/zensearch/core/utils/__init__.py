"""Small, dependency-light helpers."""
