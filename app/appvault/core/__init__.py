"""Core infrastructure: paths, settings, storage layout, catalog, theme."""
