"""Utility modules for xtmpl."""
