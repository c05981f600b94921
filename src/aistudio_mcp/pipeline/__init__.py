"""Pipeline stages: ingestion, composition and generation."""
