"""
Perplexity chat-completions client used to answer student questions.

The chat route calls `GenerationClient.generate`; identical requests are
deduplicated by the response cache in front of that route.
"""
import logging
import requests
from typing import Any, Dict, Optional

from examprep.config.settings import DEFAULT_API_URL, DEFAULT_CHAT_MODEL

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_PROMPT = (
    "You are Indicore, an AI-powered exam preparation assistant specialized in PCS, "
    "UPSC, and SSC exams. You help students with multilingual study materials, answer "
    "writing practice, document evaluation, and regional language support. Provide "
    "accurate, detailed, and exam-focused responses that help students prepare "
    "effectively for competitive exams."
)

LANGUAGE_NAMES = {
    "hi": "Hindi",
    "mr": "Marathi",
    "ta": "Tamil",
    "bn": "Bengali",
    "pa": "Punjabi",
    "gu": "Gujarati",
    "te": "Telugu",
    "ml": "Malayalam",
    "kn": "Kannada",
    "es": "Spanish",
}

UPSTREAM_ERROR_MESSAGES = {
    401: "Invalid API key. Please check your Perplexity API key.",
    402: "Insufficient credits. Please add credits to your Perplexity account.",
    403: "Access denied. Please verify your API key permissions.",
    429: "Rate limit exceeded. Please wait a moment and try again.",
}


class GenerationError(Exception):
    """Upstream generation failed; carries the HTTP status to report."""

    def __init__(self, message: str, status_code: int = 502):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def build_system_prompt(language: Optional[str] = None, system_prompt: Optional[str] = None) -> str:
    """Return the system prompt, pinned to `language` when it isn't English."""
    prompt = system_prompt or DEFAULT_SYSTEM_PROMPT
    if language and language != "en":
        lang_name = LANGUAGE_NAMES.get(language, "English")
        prompt += (
            f" Your response MUST be entirely in {lang_name}. Do not use any other language."
            f" Ensure perfect grammar and natural flow in {lang_name}."
        )
    return prompt


class GenerationClient:
    """Client for an OpenAI-style chat-completions endpoint."""

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        api_key: str = "",
        timeout: int = 60,
        default_model: str = DEFAULT_CHAT_MODEL,
        session: Any = None,
    ):
        self.api_url = api_url
        self.api_key = api_key
        self.timeout = timeout
        self.default_model = default_model
        self._session = session or requests

    def build_payload(
        self,
        message: str,
        model: Optional[str] = None,
        language: Optional[str] = None,
        system_prompt: Optional[str] = None,
    ) -> Dict[str, Any]:
        return {
            "model": model or self.default_model,
            "messages": [
                {"role": "system", "content": build_system_prompt(language, system_prompt)},
                {"role": "user", "content": message},
            ],
            "max_tokens": 4000,
            "temperature": 0.7,
            "top_p": 0.9,
            "stream": False,
            "presence_penalty": 0,
            "frequency_penalty": 1,
        }

    def generate(
        self,
        message: str,
        model: Optional[str] = None,
        language: Optional[str] = None,
        system_prompt: Optional[str] = None,
    ) -> str:
        """
        Ask the upstream model to answer `message`.

        Args:
            message: Student's question
            model: Model identifier (defaults to `default_model`)
            language: Answer language code; non-English codes pin the reply language
            system_prompt: Overrides the default exam-assistant prompt

        Returns:
            The assistant's reply text

        Raises:
            GenerationError: upstream returned an error status, was unreachable,
                or sent a body without `choices[0].message`
        """
        payload = self.build_payload(message, model, language, system_prompt)
        logger.debug(f"Requesting completion model={payload['model']} language={language}")

        try:
            response = self._session.post(
                self.api_url,
                json=payload,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else 502
            logger.error(f"Upstream generation error ({status}): {e}")
            raise GenerationError(
                UPSTREAM_ERROR_MESSAGES.get(
                    status, "An error occurred while processing your request."
                ),
                status_code=status,
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Cannot reach generation API at {self.api_url}: {e}")
            raise GenerationError(f"Cannot reach generation API: {e}", status_code=502) from e

        try:
            result = response.json()
        except ValueError as e:
            logger.error(f"Generation API returned invalid JSON: {e}")
            raise GenerationError("Invalid response format from generation API") from e

        try:
            return result["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            logger.error(f"Unexpected generation API response shape: {result!r}")
            raise GenerationError("Invalid response format from generation API") from e
