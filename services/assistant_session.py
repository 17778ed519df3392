"""Assistant widget state: typed or spoken questions, spoken answers.

Listening and speaking are mutually exclusive: starting one stops the other.
Only one query may be outstanding at a time.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from services.assistant import Assistant
from utils.inflight import InFlightFlag

logger = logging.getLogger(__name__)

RECOGNITION_ERROR_MESSAGES = {
    "no-speech": "No speech was detected. Please try again.",
    "audio-capture": "Audio capture failed. Ensure microphone is connected and permissions are granted.",
    "not-allowed": "Microphone access denied. Please enable microphone permissions in your browser settings.",
    "service-not-allowed": "Microphone access denied. Please enable microphone permissions in your browser settings.",
}


class SpeechRecognizer(Protocol):
    def start(self) -> None:
        ...

    def stop(self) -> None:
        ...


class SpeechSynthesizer(Protocol):
    def speak(self, text: str) -> None:
        ...

    def cancel(self) -> None:
        ...


def describe_recognition_error(code: str, message: str = "") -> str:
    return RECOGNITION_ERROR_MESSAGES.get(code, f"Speech recognition error: {message or code}")


def describe_start_failure(exc: Exception) -> str:
    if isinstance(exc, PermissionError):
        return ("Microphone access denied. Please enable microphone permissions "
                "in your browser settings and for this site.")
    if isinstance(exc, FileNotFoundError):
        return "No microphone found. Please ensure a microphone is connected and enabled."
    if str(exc):
        return f"Could not start microphone: {exc}"
    return "Could not start microphone."


class AssistantSession:
    def __init__(
            self,
            assistant: Assistant,
            recognizer: Optional[SpeechRecognizer] = None,
            synthesizer: Optional[SpeechSynthesizer] = None,
            learning_context: Optional[str] = None,
    ):
        self.assistant = assistant
        self.recognizer = recognizer
        self.synthesizer = synthesizer
        self.learning_context = learning_context

        self.user_input = ""
        self.response: Optional[str] = None
        self.error: Optional[str] = None
        self.listening = False
        self.speaking = False
        self.in_flight = InFlightFlag("assistant")

    @property
    def loading(self) -> bool:
        return self.in_flight.busy

    # --- speech output ---

    def stop_speaking(self) -> None:
        if self.speaking and self.synthesizer is not None:
            self.synthesizer.cancel()
        self.speaking = False

    def toggle_speaking(self) -> None:
        if not self.response or self.synthesizer is None:
            self.error = "Text-to-speech is not available or no response to read."
            return
        if self.speaking:
            self.stop_speaking()
            return
        self.stop_listening()
        self.synthesizer.speak(self.response)
        self.speaking = True

    def on_speech_end(self) -> None:
        self.speaking = False

    def on_speech_error(self, code: str) -> None:
        logger.error("Speech synthesis error: %s", code)
        self.error = f"Text-to-speech error: {code}"
        self.speaking = False

    # --- speech input ---

    def stop_listening(self) -> None:
        if self.listening and self.recognizer is not None:
            self.recognizer.stop()
        self.listening = False

    def toggle_listening(self) -> None:
        if self.recognizer is None:
            self.error = "Speech recognition is not available."
            return
        if self.listening:
            self.stop_listening()
            return

        self.stop_speaking()
        self.user_input = ""
        self.response = None
        self.error = None
        try:
            self.recognizer.start()
        except Exception as exc:
            logger.error("Error starting speech recognition: %s", exc)
            self.error = describe_start_failure(exc)
            self.listening = False
            return
        self.listening = True

    def on_transcript(self, transcript: str) -> None:
        self.user_input = (transcript or "").strip()

    def on_recognition_end(self) -> None:
        self.listening = False

    def on_recognition_error(self, code: str, message: str = "") -> None:
        logger.error("Speech recognition error: %s %s", code, message)
        self.error = describe_recognition_error(code, message)
        self.listening = False

    # --- queries ---

    async def submit(self, query: Optional[str] = None) -> Optional[str]:
        current = query or self.user_input
        if not current.strip():
            self.error = "Please enter or say your question."
            return None

        with self.in_flight.hold():
            self.error = None
            self.response = None
            self.stop_speaking()
            self.response = await self.assistant.ask(current, self.learning_context)
        return self.response

    def close(self) -> None:
        self.stop_listening()
        self.stop_speaking()
