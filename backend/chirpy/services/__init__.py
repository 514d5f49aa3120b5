"""Auth flows and their store."""
