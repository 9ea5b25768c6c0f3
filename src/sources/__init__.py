# src/sources/__init__.py — v1
