"""Simulated audio analysis.

No transcription or emotion model is called; the response is fixed text
returned after a fixed delay so existing clients see the same timing.
"""
from __future__ import annotations
import asyncio
import logging
from typing import Any

LOGGER = logging.getLogger("ai_relay.serve.audio")

AUDIO_DELAY_SECONDS = 2.5

SIMULATED_TRANSCRIPTION = (
    "This is a simulated transcription of your audio. "
    "For real transcription, consider using a dedicated Speech-to-Text API."
)
SIMULATED_EMOTION = (
    "Simulated emotion: Neutral, with hints of curiosity. "
    "(Real emotion analysis would be derived from the transcribed text using a language model)."
)


async def analyze_audio(audio_data: Any) -> dict[str, str]:
    """Return the simulated transcription and emotion, whatever the input."""
    if not audio_data:
        LOGGER.warning("Received audio analysis request without audio data (likely from placeholder recording).")
    await asyncio.sleep(AUDIO_DELAY_SECONDS)
    return {"transcription": SIMULATED_TRANSCRIPTION, "emotion": SIMULATED_EMOTION}
