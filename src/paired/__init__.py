"""Paired array layer.

This package pairs a keys container with a values container and exposes
them as one array of key/value pairs, with builders, coercion hooks and
projection shortcuts around it.
"""
