"""HTTP transport for remote backends (httpx)."""
