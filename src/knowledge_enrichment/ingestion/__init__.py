"""
Ingestion — document parsing, figure enrichment, chunking, and storage.

This module is responsible for the ETL-like pipeline that converts raw
uploads (PDF, Markdown) into tagged content units stored in a vector
database.  Embedded images are captioned by a vision model and textual
figure references are described by an LLM so that visual content becomes
retrievable alongside body text.
"""
