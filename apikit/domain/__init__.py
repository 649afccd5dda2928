"""Domain layer: protocols (ports), value objects and error types.

The domain layer has NO dependencies on FastAPI or infrastructure libraries.
"""
