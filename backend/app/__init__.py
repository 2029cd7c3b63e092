"""Authorship overlay API."""
