"""
Core utilities for report aggregation.

Modules:
    cleaning  — Amount coercion, half-up rounding, timestamp parsing
    status    — Sales / return lifecycle states and transition tables
"""
