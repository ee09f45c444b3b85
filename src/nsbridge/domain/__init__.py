"""Domain layer — package names, references, and operations.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, plugins, or config.
"""
