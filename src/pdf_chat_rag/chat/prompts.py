"""Prompt template for document-grounded answers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from langchain_core.prompts import PromptTemplate

if TYPE_CHECKING:
    from pdf_chat_rag.retrieval.models import RetrievalResult

PROMPT_BLUEPRINT = """\
You're assisting with questions about a Company's Confluence / Wiki.

Use the information from the DOCUMENTS section to provide accurate answers but act as if you knew this information innately.
If unsure, simply state that you don't know.

This is the question you have to answer based only on the information from DOCUMENTS sections:
{query}

DOCUMENTS:
{context}
"""

NO_DOCUMENTS = "(no documents found)"

_TEMPLATE = PromptTemplate.from_template(PROMPT_BLUEPRINT)


def format_context(results: list[RetrievalResult]) -> str:
    """Render retrieved chunks as ``[source§chunk] text`` blocks."""
    if not results:
        return NO_DOCUMENTS
    return "\n\n".join(f"{r.citation.short_ref()} {r.content}" for r in results)


def build_prompt(query: str, results: list[RetrievalResult]) -> str:
    """Substitute *query* and the retrieved chunks into the blueprint."""
    return _TEMPLATE.format(query=query, context=format_context(results))
