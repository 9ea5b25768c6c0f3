# src/service/__init__.py — v1
