"""
kivi - Key-Value Store Client.

Command-line client for reading, writing, and listing entries in remote
key-value stores through a single interface.

- core/: Configuration, logging, exceptions, string/URL utilities
- http/: HTTP client factory and request auth hook (httpx)
- kv/: Value model, remote source interface, backend adapters (Consul, etcd)
- cli/: Command-line interface (Typer + Rich)
"""

__version__ = "0.3.0"
