"""GitHub-backed label providers."""
