"""Per-game simulation engines (falling sand, Stack, Sudoku-Lite, community grid).

Kept free of FastAPI/Redis concerns so they can be driven by API routes, a CLI, or tests.
"""
