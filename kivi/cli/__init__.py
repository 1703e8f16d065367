"""
CLI Module.

Command-line client built with Typer. Parses flags and environment into a
backend configuration record and hands it to the dispatcher; everything
else lives in kivi.kv.

Usage:
    kivi --help
    kivi consul list app/
    kivi consul read app/db
    kivi consul write --data value.json app/db
    kivi etcd read /app/db
"""
