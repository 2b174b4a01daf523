"""Repository model, cache layout and index reading."""
