"""Shared testing utilities for the GraphQL batching gateway.

- schema_fixtures.py: in-memory schema, resolvers and request builders
"""
