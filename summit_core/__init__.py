"""Core (UI-agnostic) session dashboard logic.

This package contains:
- CSV decoding (pandas) for the session export, scheduling grid and TA roster
- session classification, grid parsing and roster parsing
- the persisted override (WIP) store
- page compute functions (JSON-serializable payloads)
- cross-source joins keyed by session code
"""
