"""Shared kernel for the customer access core.

Holds what more than one bounded context depends on: caller credentials and
tenant mappings, the external index port and its SearchGuard client, and the
permission predicate builder. Nothing here imports a bounded context.
"""
