"""LeadSift — Filterable lead search over OpenSearch indices."""

__version__ = "0.1.0"
