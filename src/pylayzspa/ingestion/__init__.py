"""Ingestion layer.

Adapters that turn cloud payloads into normalized values and state
snapshots.
"""

__all__: list[str] = []
