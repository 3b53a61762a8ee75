"""Infrastructure layer - External dependencies and implementations.

This layer contains all external dependencies including:
- Code registry backends (JSON file, SQLAlchemy)
- Commerce platform and seller directory clients (httpx)
- Webhook routes (FastAPI)
"""
