"""Plain-text playlist files."""
