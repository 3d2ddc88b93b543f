"""Domain layer — tree model, identity helpers, and reference resolution.

This layer depends only on the standard library.
It must never import from services, infrastructure, commands, or config.
"""
