"""Domain rules built on the entity store.

This package holds the warehouse, grading, healthcare, finance, and
inventory log workflows. Each module composes store, index, and
persistence operations and returns values instead of printing.
"""
