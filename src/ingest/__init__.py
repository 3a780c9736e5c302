"""Delimited record import.

This module reads fixed-arity delimited text into typed entities.
It feeds parsed entities to the store layer.
"""
