"""Interactive changeset authoring for multi-package repositories."""
