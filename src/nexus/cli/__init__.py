"""CLI layer for nexus."""
