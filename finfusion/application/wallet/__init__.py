"""
Application layer for the wallet bounded context.

Executors and use cases coordinate domain entities and ports to fulfill
transfers, trades and assistant conversations. No framework or
infrastructure imports allowed.
"""
