"""HTTP-facing helpers shared across routers."""
