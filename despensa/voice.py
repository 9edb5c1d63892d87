"""Voice capture session feeding transcripts into acquisition registration."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


class VoiceCapture:
    """Accumulates final speech-recognition results for one recording.

    The recognizer itself is external; it reports results through
    :meth:`add_result`. When the recording stops (explicitly or naturally) the
    accumulated transcript is handed to ``on_transcript`` exactly once.
    Cancelling never hands anything over.
    """

    def __init__(self, on_transcript: Callable[[str], Awaitable[object]]) -> None:
        self._on_transcript = on_transcript
        self._segments: list[str] = []
        self._recording = False
        self._finished = False

    @property
    def recording(self) -> bool:
        return self._recording

    @property
    def transcript(self) -> str:
        return " ".join(self._segments).strip()

    def start(self) -> None:
        if self._recording:
            raise RuntimeError("Gravação já está em andamento")
        self._segments = []
        self._recording = True
        self._finished = False

    def add_result(self, text: str, is_final: bool = True) -> None:
        # Interim hypotheses are superseded by the final result.
        if self._recording and is_final and text.strip():
            self._segments.append(text.strip())

    async def stop(self):
        """Finish the recording and register what was said.

        Returns:
            Whatever ``on_transcript`` returned, or None if nothing was said
            or the session had already finished.
        """
        if not self._recording or self._finished:
            return None
        self._recording = False
        self._finished = True

        transcript = self.transcript
        if not transcript:
            logger.info("Recording ended without speech")
            return None
        return await self._on_transcript(transcript)

    async def end(self):
        """Natural end of recognition; same as an explicit stop."""
        return await self.stop()

    def cancel(self) -> None:
        self._recording = False
        self._finished = True
        self._segments = []
