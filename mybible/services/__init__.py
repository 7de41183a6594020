"""
Services

- references: citation parsing, verse lookup and module access
- cache: per-module chapter index cache
"""
