"""Classes nested inside other classes."""
