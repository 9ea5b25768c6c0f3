# src/fetch/__init__.py — v1
