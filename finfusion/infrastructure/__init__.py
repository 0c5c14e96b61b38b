"""
Infrastructure layer package.

Contains adapters implementing domain ports against the outside
world (the remote ledger backend and the inference relay).
"""
