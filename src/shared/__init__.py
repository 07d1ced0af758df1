"""
Shared Layer - Cross-Cutting Concerns
Exceptions + error contract, structured logging, HTTP middleware, health probe.
"""
