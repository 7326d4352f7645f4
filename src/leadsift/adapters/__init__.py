"""Search adapter layer — Connectors for the document store holding lead records.

Built-in adapters:
  - opensearch: OpenSearch v2+ (async ``opensearch-py`` client)

Implement ``SearchAdapter`` to back the lead search with another engine.
"""
