"""Application-level API routers."""
