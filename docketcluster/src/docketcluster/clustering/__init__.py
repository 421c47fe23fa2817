from .cache import ClusterCache, CsvClusterCache, MemoryClusterCache, content_key
from .runner import DEFAULT_MIN_CLUSTER_SIZE, cache_key, run_clustering, to_assignments

__all__ = [
    'ClusterCache',
    'CsvClusterCache',
    'MemoryClusterCache',
    'content_key',
    'cache_key',
    'run_clustering',
    'to_assignments',
    'DEFAULT_MIN_CLUSTER_SIZE',
]
