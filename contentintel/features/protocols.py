"""
Protocol and base class for analysis engines.

AnalysisEngine is the structural subtyping protocol the dispatcher talks
to; BaseAnalysisEngine provides the Template Method implementation with
prompt assembly, timing, logging and error wrapping.
"""

import logging
import time
from abc import abstractmethod
from typing import Any, Optional, Protocol, runtime_checkable

from contentintel.core.models import ContentCategory, RawEngineOutput
from contentintel.utils.errors import AnalysisError


@runtime_checkable
class AnalysisEngine(Protocol):
    """
    Protocol that every category collaborator implements.

    Uses structural subtyping: a class is compatible if it has these
    methods/properties, without explicit inheritance.
    """

    @property
    def engine_id(self) -> str:
        """Unique identifier used in logs and results."""
        ...

    @property
    def category(self) -> ContentCategory:
        """Category this engine answers for."""
        ...

    def analyze(self, content: str, hint: Optional[str] = None) -> RawEngineOutput:
        """Return the collaborator's raw, unparsed answer."""
        ...


class BaseAnalysisEngine:
    """
    Template Method base class for LLM-backed engines.

    analyze() builds the prompts, calls the shared client, times the call
    and wraps any failure in AnalysisError. Subclasses implement
    _system_prompt() and _user_prompt(). The returned text is never
    parsed here; that is the normalizer's job.
    """

    def __init__(
        self,
        engine_id: str,
        display_name: str,
        category: ContentCategory,
        version: str,
        client: Any,  # LLMClient
        max_tokens: Optional[int] = None,
    ):
        self._engine_id = engine_id
        self._display_name = display_name
        self._category = category
        self._version = version
        self._client = client
        self._max_tokens = max_tokens
        self.logger = logging.getLogger(f"engine.{category.value}")

    @property
    def engine_id(self) -> str:
        return self._engine_id

    @property
    def display_name(self) -> str:
        return self._display_name

    @property
    def category(self) -> ContentCategory:
        return self._category

    @property
    def version(self) -> str:
        return self._version

    def analyze(self, content: str, hint: Optional[str] = None) -> RawEngineOutput:
        """
        Template method: build prompts -> chat -> wrap raw text.

        Args:
            content: Trimmed content submitted by the caller.
            hint: Category-specific hint (media kind, audio platform).

        Returns:
            RawEngineOutput holding the unparsed response.

        Raises:
            AnalysisError: If the collaborator call fails.
        """
        start = time.time()
        self.logger.debug(f"Executing {self._display_name} v{self._version} ('{self._engine_id}')")

        try:
            text = self._client.chat(
                system_prompt=self._system_prompt(hint),
                user_prompt=self._user_prompt(content, hint),
                max_tokens=self._max_tokens,
            )
        except AnalysisError:
            raise
        except Exception as e:
            self.logger.error(f"Engine '{self._engine_id}' failed: {e}")
            raise AnalysisError(
                f"Engine '{self._engine_id}' failed: {e}",
                engine_name=self._engine_id,
                original_error=e,
            ) from e

        elapsed = time.time() - start
        self.logger.info(f"{self._display_name} answered in {elapsed:.3f}s")

        return RawEngineOutput(
            category=self._category,
            text=text,
            engine_name=self._engine_id,
            elapsed=elapsed,
            model_used=getattr(self._client, "model_id", None),
        )

    @abstractmethod
    def _system_prompt(self, hint: Optional[str]) -> str:
        """Role and output schema for the collaborator."""
        raise NotImplementedError

    @abstractmethod
    def _user_prompt(self, content: str, hint: Optional[str]) -> str:
        raise NotImplementedError
