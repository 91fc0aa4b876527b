"""PDF Chat RAG — retrieval-augmented chat over ingested PDF documents."""

__version__ = "0.1.0"
