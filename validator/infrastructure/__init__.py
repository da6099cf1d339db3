"""Infrastructure Layer - chain client, persistence, logging.

Invariants:
    - Infrastructure never imports from services/
    - Every external failure mapped to a ValidatorError subclass at the boundary
"""
