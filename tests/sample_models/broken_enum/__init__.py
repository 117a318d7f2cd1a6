"""Enums whose accessors misbehave."""
