"""Vehicle Relay — registration-number lookup relay for the mParivahan registry API.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""

__version__ = "1.0.0"
