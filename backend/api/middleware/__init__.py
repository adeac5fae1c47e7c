"""HTTP middleware and auth dependencies."""
