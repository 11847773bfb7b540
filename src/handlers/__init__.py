"""Lambda handlers for the ticket desk HTTP API."""
