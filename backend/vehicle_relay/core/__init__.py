"""Core Layer — pure lookup logic, no IO, no async, no HTTP client.

Invariants:
    - No module in core/ imports from services/, api/ or infrastructure/
    - All functions are pure and deterministic
"""
