"""
Infrastructure adapters for the wallet bounded context.
"""
