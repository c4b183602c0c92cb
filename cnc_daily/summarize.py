"""Summarization module using the Gemini generateContent API."""

import time

import requests

from .config import GeminiConfig
from .exceptions import MissingCredential, SummarizationError
from .logging_config import create_execution_logger

PROMPT_TEMPLATE = """You are a helpful assistant writing short news summaries in a friendly, conversational tone.
Summarize the following article for a general audience in 150-220 words.
- Keep it factual and neutral.
- Avoid speculation, slurs, adult content, or harassment.
- Include a one-sentence takeaway at the end starting with 'Why it matters:'.
Provide only plain paragraphs without lists.

Title: {title}
URL: {url}
Article text:
{text}
"""

# Blocking is left to the safety filter downstream.
SAFETY_SETTINGS = [
    {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_SEXUALLY_EXPLICIT", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_NONE"},
]


class GeminiSummarizer:
    """Turns article text into a plain-paragraph summary."""

    def __init__(
        self,
        config: GeminiConfig,
        session: requests.Session | None = None,
        execution_id: str | None = None,
    ):
        self.config = config
        self.logger = create_execution_logger("summarizer", execution_id)
        self.session = session or requests.Session()

    @property
    def endpoint(self) -> str:
        return f"{self.config.base_url}/v1beta/models/{self.config.model}:generateContent"

    def build_prompt(self, title: str, url: str, text: str) -> str:
        return PROMPT_TEMPLATE.format(
            title=title, url=url, text=text[: self.config.max_input_chars]
        )

    def build_request(self, prompt: str) -> dict:
        return {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "safetySettings": SAFETY_SETTINGS,
        }

    def summarize(self, category: str, title: str, url: str, text: str) -> str:
        """Summarize an article.

        Returns:
            The summary text, or an empty string when the service returns
            no candidates

        Raises:
            MissingCredential: If no API key is configured
            SummarizationError: On a non-success response, transport failure or
                unreadable body
        """
        if not self.config.api_key:
            raise MissingCredential("GEMINI_API_KEY")

        prompt = self.build_prompt(title, url, text)
        self.logger.info(
            "Calling Gemini API",
            category=category,
            item_title=title,
            model=self.config.model,
            content_length=min(len(text), self.config.max_input_chars),
        )

        start_time = time.time()
        try:
            response = self.session.post(
                self.endpoint,
                params={"key": self.config.api_key},
                json=self.build_request(prompt),
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            self.logger.error(f"Gemini request failed: {e}", category=category, error=str(e))
            raise SummarizationError(str(e)) from e
        response_time_ms = int((time.time() - start_time) * 1000)

        if not response.ok:
            self.logger.error(
                f"Gemini returned status {response.status_code}",
                category=category,
                status_code=response.status_code,
            )
            raise SummarizationError(response.text, response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            self.logger.error(
                f"Gemini returned invalid JSON: {e}", category=category, error=str(e)
            )
            raise SummarizationError(f"invalid JSON response: {e}", response.status_code) from e

        summary = self.extract_text(data)
        self.logger.info(
            "Gemini response received",
            category=category,
            item_title=title,
            response_length=len(summary),
            response_time_ms=response_time_ms,
        )
        return summary

    @staticmethod
    def extract_text(data: dict) -> str:
        """Join the text parts of the first candidate."""
        candidates = data.get("candidates") or []
        if not candidates:
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "\n".join(part.get("text", "") for part in parts).strip()
