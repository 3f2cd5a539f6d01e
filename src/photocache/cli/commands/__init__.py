"""CLI subcommands registered on the main app."""
