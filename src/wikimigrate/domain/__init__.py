"""Domain layer — documents, slugs, links, tags, markup rules.

This layer depends only on the stdlib and ruamel.yaml.
It must never import from services, infrastructure, commands, or config.
"""
