"""
Application layer package.

Contains executors and use cases that orchestrate domain objects
through ports. No framework imports and no direct IO.
"""
