"""Infrastructure adapters: logging, rate limit storage, auth providers, transformers."""
