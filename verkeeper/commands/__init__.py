"""CLI subcommands for verkeeper: ``get``, ``bump`` and ``tag``."""
