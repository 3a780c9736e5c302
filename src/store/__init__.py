"""Entity storage layer.

This module holds the keyed entity store, grouping indexes, and JSON
snapshot persistence. It powers the domain workflows and the SDK.
"""
