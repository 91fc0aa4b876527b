"""FastAPI application exposing the PDF chat service as a REST API."""

from __future__ import annotations

import argparse
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response, StreamingResponse

from pdf_chat_rag import __version__
from pdf_chat_rag.chat.service import ChatBotService
from pdf_chat_rag.config import Settings, configure_logging, get_settings
from pdf_chat_rag.errors import DownloadError, InvalidSourceError, RAGError

logger = logging.getLogger(__name__)


def build_service(settings: Settings) -> ChatBotService:
    """Wire the production collaborators (Chroma, OpenAI) from *settings*."""
    from pdf_chat_rag.chat.llm import get_llm
    from pdf_chat_rag.ingestion.service import DataLoader
    from pdf_chat_rag.retrieval.chroma_store import ChromaVectorStore
    from pdf_chat_rag.retrieval.embeddings import get_embeddings
    from pdf_chat_rag.retrieval.retriever import SemanticRetriever

    store = ChromaVectorStore.from_settings(settings, get_embeddings(settings))
    return ChatBotService(
        retriever=SemanticRetriever(store, default_k=settings.top_k),
        llm=get_llm(settings),
        loader=DataLoader(store, settings),
    )


def get_service(request: Request) -> ChatBotService:
    return request.app.state.service


def create_app(settings: Settings | None = None, service: ChatBotService | None = None) -> FastAPI:
    """Build the application.

    Parameters
    ----------
    settings:
        Defaults to :func:`get_settings`.
    service:
        Pre-built chat service; when omitted one is wired from *settings*.
    """
    settings = settings or get_settings()
    service = service or build_service(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if settings.load_on_startup:
            try:
                report = service.load()
                logger.info("Startup load: %s", report.model_dump(exclude={"failed"}))
            except RAGError:
                logger.exception("Startup load did not complete")
        yield

    app = FastAPI(
        title="PDF Chat RAG API",
        version=__version__,
        description="Ask questions about the PDFs loaded into the vector store.",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.service = service

    # The bundled chat frontend is served from a different origin.
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

    @app.exception_handler(InvalidSourceError)
    async def invalid_source(request: Request, exc: InvalidSourceError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(DownloadError)
    async def download_failed(request: Request, exc: DownloadError) -> JSONResponse:
        return JSONResponse(status_code=502, content={"detail": str(exc)})

    # ── Routes ────────────────────────────────────────────────────────────
    @app.get("/health")
    def health(svc: ChatBotService = Depends(get_service)) -> JSONResponse:
        """Readiness check; 503 when the vector store is unreachable."""
        if svc.health_check():
            return JSONResponse({"status": "ok"})
        return JSONResponse(status_code=503, content={"status": "unavailable"})

    @app.get("/chat", response_class=PlainTextResponse)
    def chat(query: str = Query(...), svc: ChatBotService = Depends(get_service)) -> str:
        """Answer *query* from the stored documents."""
        return svc.chat(query)

    @app.get("/chat/stream")
    async def chat_stream(query: str = Query(...), svc: ChatBotService = Depends(get_service)) -> StreamingResponse:
        """Stream the answer to *query* as plain-text fragments."""
        fragments = await svc.achat_stream(query)
        return StreamingResponse(fragments, media_type="text/plain; charset=utf-8")

    @app.post("/load")
    def load(svc: ChatBotService = Depends(get_service)) -> Response:
        """Bulk-load the docs folder if the collection is empty."""
        svc.load()
        return Response(status_code=200)

    @app.post("/loadWithFile")
    def load_with_file(file: str = Query(...), svc: ChatBotService = Depends(get_service)) -> Response:
        """Load the PDF at URL *file* (or the docs folder when empty)."""
        svc.load(file)
        return Response(status_code=200)

    @app.post("/clear")
    def clear(svc: ChatBotService = Depends(get_service)) -> Response:
        """Delete every stored chunk."""
        svc.clear()
        return Response(status_code=200)

    return app


def main(argv: list[str] | None = None) -> None:
    """Run the API with uvicorn."""
    import uvicorn

    parser = argparse.ArgumentParser(description="Serve the PDF chat RAG API.")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8080)
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run(create_app(settings), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
