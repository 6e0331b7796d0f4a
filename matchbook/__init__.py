"""Matchbook - reconcile music-provider tracks against a Jellyfin library."""
