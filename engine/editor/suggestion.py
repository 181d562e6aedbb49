"""
AI suggestion session — one generation request at a time.

State machine:

    idle --submit(prompt)--> pending --resolve--> succeeded
                                      --fail-----> failed
    succeeded | failed --clear()--> idle
    succeeded --fold()--> idle           (appends result to the buffer)

The network call is a pluggable strategy: any `async (prompt) -> str`
callable. At most one request is pending; a second submit while pending is
rejected, not queued. After dispose(), late resolutions are dropped.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from engine.editor.buffer import CodeBuffer
from engine.editor.types import (
    EMPTY_RESULT_MESSAGE,
    GENERIC_FAILURE_MESSAGE,
    SuggestionRequest,
    SuggestionStatus,
    UpstreamError,
)

logger = logging.getLogger(__name__)

CANCELLED_MESSAGE = "Generation was cancelled."

Generator = Callable[[str], Awaitable[str]]
Notifier = Callable[[str], None]


def _log_notice(message: str) -> None:
    logger.info("notice: %s", message)


class SuggestionSession:
    """Owns the current SuggestionRequest and drives it through the state machine."""

    def __init__(self, generator: Generator, notify: Notifier | None = None):
        self.generator = generator
        self.notify = notify or _log_notice
        self.request = SuggestionRequest()
        self.disposed = False
        # Bumped on every accepted submit; stale resolutions compare against it
        self._sequence = 0

    @property
    def status(self) -> SuggestionStatus:
        return self.request.status

    @property
    def loading(self) -> bool:
        return self.request.is_pending

    async def submit(self, prompt: str) -> bool:
        """
        Start a generation for `prompt` and wait for it to finish.

        Returns:
            True if the request was accepted (it then always ends in
            succeeded or failed), False if it was rejected
        """
        if self.disposed:
            return False
        if not prompt or not prompt.strip():
            self.notify("Please enter a prompt!")
            return False
        if self.request.is_pending:
            self.notify("A suggestion is already being generated.")
            return False

        self._sequence += 1
        sequence = self._sequence
        self.request = SuggestionRequest(prompt_text=prompt, status=SuggestionStatus.PENDING)

        try:
            text = await self.generator(prompt)
        except asyncio.CancelledError:
            self._finish(sequence, error=CANCELLED_MESSAGE)
            raise
        except UpstreamError as e:
            self._finish(sequence, error=e.message)
        except Exception:
            logger.exception("suggestion: generator raised")
            self._finish(sequence, error=GENERIC_FAILURE_MESSAGE)
        else:
            if not isinstance(text, str) or not text.strip():
                self._finish(sequence, error=EMPTY_RESULT_MESSAGE)
            else:
                self._finish(sequence, result=text)
        return True

    def _finish(self, sequence: int, result: str | None = None, error: str | None = None) -> None:
        if self.disposed or sequence != self._sequence:
            logger.debug("suggestion: dropping stale resolution #%d", sequence)
            return

        prompt = self.request.prompt_text
        if error is not None:
            self.request = SuggestionRequest(
                prompt_text=prompt,
                status=SuggestionStatus.FAILED,
                error_message=error,
            )
            self.notify(error)
        else:
            self.request = SuggestionRequest(
                prompt_text=prompt,
                status=SuggestionStatus.SUCCEEDED,
                result_text=result,
            )

    def clear(self) -> bool:
        """Discard a finished request. Ignored while a request is pending."""
        if self.request.is_pending:
            return False
        self.request = SuggestionRequest()
        return True

    def fold(self, buffer: CodeBuffer) -> bool:
        """
        Append the succeeded result to `buffer` and return to idle.

        No-op (returns False) unless the status is succeeded with a
        non-blank result.
        """
        if self.request.status is not SuggestionStatus.SUCCEEDED:
            self.notify("There is no AI output to append yet.")
            return False
        result = self.request.result_text or ""
        if not result.strip():
            self.notify("There is no AI output to append yet.")
            return False

        buffer.append(result)
        self.request = SuggestionRequest()
        return True

    def dispose(self) -> None:
        """Tear down: any in-flight request will resolve into nothing."""
        self.disposed = True
