"""
Single-shot client for the text generation service.
"""

import base64
import logging
from typing import Any, Optional

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_openai import ChatOpenAI

from .config import TailorConfig
from .encoder import TEXT
from .errors import GenerationFailed, ServerMisconfigured
from .models import EncodedDocument

logger = logging.getLogger(__name__)


def build_chat_model(config: TailorConfig) -> BaseChatModel:
    """
    Initialize the chat model for the configured provider.

    Raises:
        ServerMisconfigured: If the provider's API key is not set
    """
    if not config.api_key:
        logger.error(f"{config.api_key_env_var} is not set")
        raise ServerMisconfigured(
            "Server configuration error",
            details={"missing": config.api_key_env_var},
        )

    if config.provider == "google":
        return ChatGoogleGenerativeAI(
            model=config.model,
            google_api_key=config.api_key,
            temperature=config.temperature,
            timeout=config.request_timeout_seconds,
            max_retries=0,
        )
    return ChatOpenAI(
        model=config.model,
        api_key=config.api_key,
        temperature=config.temperature,
        timeout=config.request_timeout_seconds,
        max_retries=0,
    )


class GenerationClient:
    """Sends one prompt (plus optional inline document) and returns the text."""

    def __init__(self, llm: BaseChatModel, model_name: Optional[str] = None):
        self.llm = llm
        self.model_name = model_name or getattr(llm, "model", None) or "unknown"

    @classmethod
    def from_config(cls, config: TailorConfig) -> "GenerationClient":
        return cls(build_chat_model(config), model_name=config.model)

    def generate(
        self, prompt: str, attachment: Optional[EncodedDocument] = None
    ) -> str:
        """
        Run a single completion.

        Args:
            prompt: Instruction text
            attachment: Optional encoded document sent inline with the prompt

        Returns:
            Raw completion text

        Raises:
            GenerationFailed: On any service error, timeout or empty response
        """
        message = HumanMessage(content=self._build_content(prompt, attachment))

        try:
            response = self.llm.invoke([message])
        except Exception as e:
            logger.error(f"Generation call to {self.model_name} failed: {e}")
            raise GenerationFailed(
                "The AI service failed to respond. Please try again.",
                details={"error": type(e).__name__},
            ) from e

        text = self._extract_text(response)
        if not text.strip():
            raise GenerationFailed(
                "The AI service returned an empty response. Please try again."
            )
        return text

    def _build_content(
        self, prompt: str, attachment: Optional[EncodedDocument]
    ) -> str | list[dict[str, Any]]:
        """Assemble message content: plain text, or text plus a document block."""
        if attachment is None:
            return prompt

        if attachment.mime_type == TEXT:
            # Plain text travels as a text part; every provider accepts that.
            document_text = base64.b64decode(attachment.data).decode(
                "utf-8", errors="replace"
            )
            return [
                {"type": "text", "text": prompt},
                {"type": "text", "text": f"Resume document:\n{document_text}"},
            ]

        return [
            {"type": "text", "text": prompt},
            {
                "type": "file",
                "source_type": "base64",
                "mime_type": attachment.mime_type,
                "data": attachment.data,
            },
        ]

    @staticmethod
    def _extract_text(response: Any) -> str:
        """Pull the completion text out of a chat model response."""
        content = response.content if hasattr(response, "content") else response

        if isinstance(content, str):
            return content

        # Some providers return a list of content parts.
        if isinstance(content, list):
            parts = []
            for part in content:
                if isinstance(part, str):
                    parts.append(part)
                elif isinstance(part, dict) and part.get("type") == "text":
                    parts.append(part.get("text", ""))
            return "".join(parts)

        return ""
