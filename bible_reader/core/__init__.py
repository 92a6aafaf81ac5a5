"""Core reader logic — translation model, store, catalog, and reading session."""
