"""Presentation layer: HTTP middleware, routing, auth, rate limiting, transformers."""
