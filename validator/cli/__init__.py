"""CLI Layer - argument parsing and process entry point."""
