"""Domain layer — catalog models, normalization, and pure helpers.

This layer depends only on stdlib, pydantic, and structlog.
It must never import from services, infrastructure, commands, or config.
"""
