"""
Chat — retrieval-augmented answers over the stored PDF chunks.

Public API
----------
- :class:`ChatBotService` — chat, streaming chat, and load/clear delegation.
- :func:`build_prompt` — render the fixed prompt for a query and its context.
"""

from pdf_chat_rag.chat.prompts import PROMPT_BLUEPRINT, build_prompt
from pdf_chat_rag.chat.service import ChatBotService

__all__ = [
    "PROMPT_BLUEPRINT",
    "ChatBotService",
    "build_prompt",
]
