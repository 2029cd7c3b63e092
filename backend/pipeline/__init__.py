"""Authorship attribution pipeline."""
