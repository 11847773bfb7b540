"""Persistence for events and tickets."""
