"""Infrastructure Layer — upstream HTTP client and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - All upstream calls wrapped with timeout/retry and mapped to UpstreamResult
"""
