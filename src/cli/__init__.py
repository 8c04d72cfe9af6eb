"""Command line interface for inspecting blockdb datasets."""
