"""
Shared module package.

Contains cross-cutting concerns used by the wallet context:
- Error handling and mapping
- Security middleware
- Rate limiting
- Logging configuration
"""
