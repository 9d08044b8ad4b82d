"""Command-line interface for filevault."""
