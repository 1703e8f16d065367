"""
Key-Value Sources.

- base.py: KVValue, KVDisplayConfig, KVRemoteSource interface
- commands.py: Command records and backend configuration variants
- consul.py: Consul KV HTTP API adapter
- etcd.py: etcd v3 JSON gateway adapter
"""
