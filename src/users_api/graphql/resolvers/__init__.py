"""Resolver package for the GraphQL schema.

Resolvers open a database session, delegate to the user record store and
convert rows into GraphQL types.
"""
