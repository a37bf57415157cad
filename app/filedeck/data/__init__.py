"""Bundled data files for filedeck."""
