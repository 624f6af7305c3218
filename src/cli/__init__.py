"""CLI tools for the IFSC lookup service.

- ``python -m src.cli.lookup <IFSC>``: resolve a code (``--json`` for JSON).
- ``python -m src.cli.lookup --stats``: print store freshness statistics.
"""
