"""
Ingestion — PDF loading, chunking, embedding and storage in the vector index.

This module converts an uploaded PDF into embedded chunks stored under a
per-upload namespace of the shared vector index.
"""
