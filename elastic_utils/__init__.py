"""
Utilities for working with Elasticsearch: pooled connections, health checks,
declarative mappings, index management and versioned document storage.
"""
