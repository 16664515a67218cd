"""
Shared module package.

Contains cross-cutting concerns used across bounded contexts:
- Error handling and mapping
- CORS headers
- Rate limiting
- Logging configuration
"""
