"""Shared helpers: config, logging, errors, HTTP plumbing."""
