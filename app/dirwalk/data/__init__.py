"""Bundled data files for dirwalk."""
