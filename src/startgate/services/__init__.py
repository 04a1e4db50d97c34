"""Dependency collaborators probed at startup."""
