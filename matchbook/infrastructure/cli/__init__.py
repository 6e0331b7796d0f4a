"""Command line interface for reviewing and accepting track matches."""
