"""Adapters implementing the typeschema ports."""
