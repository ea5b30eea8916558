"""HTTP surface for SyncBrain: routes, schemas, and middleware."""
