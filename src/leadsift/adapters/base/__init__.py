"""Base adapter interface — Abstract classes for search engine connectors."""

from leadsift.adapters.base.adapter import AdapterHealth, SearchAdapter

__all__ = ["AdapterHealth", "SearchAdapter"]
