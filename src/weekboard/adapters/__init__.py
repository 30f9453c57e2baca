"""Storage adapters - concrete repository implementations.

- weekboard.adapters.sqlite: relational local store
- weekboard.adapters.rest_api: remote document store over HTTP
"""
