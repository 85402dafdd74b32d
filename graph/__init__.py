"""Data model for imports, dependency sets and the import graph."""
