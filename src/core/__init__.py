"""Configuration, security, and rate limiting."""
