"""HTTP API for tsgraph."""
