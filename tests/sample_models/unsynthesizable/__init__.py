"""Models with field types no prefab value exists for."""
