"""Services Layer - command routing, session bootstrap, collaborator handlers.

Invariants:
    - CommandHandler is the only entry point the CLI calls
    - Every command maps to exactly one collaborator call

Design Decisions:
    - One handler file per collaborator for locality (handle_service, handle_database,
      handle_rental)
"""
