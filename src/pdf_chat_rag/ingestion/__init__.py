"""
Ingestion — PDF loading, chunking, and storage into the vector store.

:class:`~pdf_chat_rag.ingestion.service.DataLoader` scans the docs folder
(or downloads one URL), extracts text with an ordered list of reader
strategies, splits it into token-bounded chunks and stores them.
"""
