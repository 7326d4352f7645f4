from leadsift.adapters.opensearch.adapter import OpenSearchAdapter

__all__ = ["OpenSearchAdapter"]
