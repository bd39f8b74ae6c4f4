"""Adapters: driving (CLI) and driven (files, cache, formatting, console)."""
