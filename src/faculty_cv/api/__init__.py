"""HTTP API for faculty CV generation."""
