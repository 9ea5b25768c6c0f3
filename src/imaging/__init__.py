# src/imaging/__init__.py — v1
