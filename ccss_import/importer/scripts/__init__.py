"""Command-line entry points for the importer."""
