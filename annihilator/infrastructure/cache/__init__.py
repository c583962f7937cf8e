"""Object Cache Implementations.

Provides the in-memory RuntimeCache and the file-based FileCacheStore
(hot in-memory layer over one file per key, one directory per group).
Bounded Context: Cache Management
"""
