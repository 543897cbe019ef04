"""
Analysis dispatch.

Selects the collaborator for a category and calls it on a worker pool so
the wait is bounded by a timeout. Transport errors, timeouts and missing
engines all come back as EngineError values; nothing is raised to the
caller and nothing is retried.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import Dict, Iterable, Optional, Union

from contentintel.core.models import ContentCategory, EngineError, RawEngineOutput
from contentintel.features.protocols import AnalysisEngine
from contentintel.utils.errors import EngineTimeoutError

DEFAULT_ENGINE_TIMEOUT = 90.0


class AnalysisDispatch:
    """
    Routes content to the category's engine under a timeout.

    Usage:
        dispatch = AnalysisDispatch(engines, timeout=90.0)
        outcome = dispatch.dispatch(ContentCategory.NEWS, "some claim")
        dispatch.shutdown()
    """

    def __init__(
        self,
        engines: Iterable[AnalysisEngine],
        max_workers: int = 8,
        timeout: float = DEFAULT_ENGINE_TIMEOUT,
    ):
        """
        Initialize dispatch.

        Args:
            engines: One engine per category; later entries replace earlier ones.
            max_workers: Size of the worker pool running engine calls.
            timeout: Seconds to wait for an engine before giving up.
        """
        self.engines: Dict[ContentCategory, AnalysisEngine] = {}
        for engine in engines:
            self.engines[engine.category] = engine
        self.timeout = timeout
        self.executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="engine")
        self.logger = logging.getLogger("dispatch")

    def dispatch(
        self,
        category: ContentCategory,
        content: str,
        hint: Optional[str] = None,
    ) -> Union[RawEngineOutput, EngineError]:
        """
        Call the category's engine and wait at most `timeout` seconds.

        Returns:
            RawEngineOutput on an answer, EngineError otherwise.
        """
        engine = self.engines.get(category)
        if engine is None:
            self.logger.error(f"No engine registered for '{category.value}'")
            return EngineError(
                category=category,
                reason=f"no engine registered for {category.value}",
                engine_name="none",
            )

        start = time.time()
        future = self.executor.submit(engine.analyze, content, hint)
        try:
            return future.result(timeout=self.timeout)
        except FuturesTimeoutError:
            future.cancel()
            error = EngineTimeoutError(engine.engine_id, self.timeout)
            self.logger.warning(str(error))
            return EngineError(
                category=category,
                reason=f"timeout after {self.timeout:.1f}s",
                engine_name=engine.engine_id,
                error=error,
                elapsed=time.time() - start,
            )
        except Exception as e:
            self.logger.warning(f"Engine '{engine.engine_id}' failed: {e}")
            return EngineError(
                category=category,
                reason=f"engine failure: {e}",
                engine_name=engine.engine_id,
                error=e,
                elapsed=time.time() - start,
            )

    def shutdown(self) -> None:
        """Shutdown thread pool without waiting on abandoned engine calls."""
        self.logger.info("Shutting down analysis dispatch")
        self.executor.shutdown(wait=False, cancel_futures=True)
