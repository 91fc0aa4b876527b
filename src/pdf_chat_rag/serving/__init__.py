"""
Serving — FastAPI application for the PDF chat service.

Run with ``pdf-chat-rag --port 8080`` or
``uvicorn pdf_chat_rag.serving.app:create_app --factory``.
"""
