"""Infrastructure layer: persistence, library connector and CLI."""
