"""Game domain services: players, questions, state and round transitions.

This package contains the pure round logic imported by HTTP routes and
socket handlers, plus the thin persistence and session layers that wrap it,
keeping transport concerns separated from core game mechanics.
"""
