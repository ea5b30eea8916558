"""Command-line tools for SyncBrain.

- ``python -m syncbrain.cli`` (or ``python -m syncbrain.cli.manage``) --
  ingest, list, delete, search, and reconcile content for an owner.
"""
