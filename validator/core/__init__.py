"""Core Layer - commands, identity, config document, errors, reporting.

Invariants:
    - No module in core/ imports from services/, cli/, infrastructure/, or db/
    - No network or database IO; file access limited to reading the config document
      and the reporter's output streams

Design Decisions:
    - Functional core separated from the imperative shell: services/ orchestrate
      the async collaborator calls around these types
"""
