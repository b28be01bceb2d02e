"""Infrastructure layer — storage, cache, HTTP providers, page host.

This layer depends on stdlib and third-party libs (httpx, Jinja2).
It must never import from services, commands, or output.
"""
