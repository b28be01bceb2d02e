"""Domain layer — country codes, gate models, and the fault taxonomy.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
