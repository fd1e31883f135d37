# src/version.py — v1
__version__ = "0.2.0"
