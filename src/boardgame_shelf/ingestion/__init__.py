"""Ingestion from the BoardGameGeek XML API 2."""
