"""Core lead search — query compilation, index/field discovery, and orchestration."""
