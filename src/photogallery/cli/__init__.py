"""Operator tasks (invoke) for photogallery."""
