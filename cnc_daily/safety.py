"""Toxicity gate using the Perspective comment analyzer."""

import requests

from .config import PerspectiveConfig
from .exceptions import ClassificationError, MissingCredential
from .logging_config import create_execution_logger


class PerspectiveSafetyFilter:
    """Admits a text only if every requested attribute scores below threshold."""

    def __init__(
        self,
        config: PerspectiveConfig,
        session: requests.Session | None = None,
        execution_id: str | None = None,
    ):
        self.config = config
        self.logger = create_execution_logger("safety_filter", execution_id)
        self.session = session or requests.Session()

    @property
    def endpoint(self) -> str:
        return f"{self.config.base_url}/v1alpha1/comments:analyze"

    def build_request(self, text: str) -> dict:
        return {
            "comment": {"text": text},
            "languages": ["en"],
            "requestedAttributes": {name: {} for name in self.config.attributes},
        }

    def analyze(self, text: str) -> dict[str, float]:
        """Score a text on every configured attribute.

        Attributes missing from the response score 0.

        Raises:
            MissingCredential: If no API key is configured
            ClassificationError: On a non-success response, transport failure or
                unreadable body
        """
        if not self.config.api_key:
            raise MissingCredential("PERSPECTIVE_API_KEY")

        try:
            response = self.session.post(
                self.endpoint,
                params={"key": self.config.api_key},
                json=self.build_request(text),
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            raise ClassificationError(str(e)) from e

        if not response.ok:
            raise ClassificationError(response.text, response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise ClassificationError(f"invalid JSON response: {e}", response.status_code) from e

        attribute_scores = data.get("attributeScores") or {}
        scores = {}
        for name in self.config.attributes:
            summary = (attribute_scores.get(name) or {}).get("summaryScore") or {}
            scores[name] = float(summary.get("value") or 0)
        return scores

    def is_safe(self, text: str, category: str = "") -> bool:
        """Return True only if every score is strictly below the threshold.

        A classification failure counts as unsafe.

        Raises:
            MissingCredential: If no API key is configured
        """
        try:
            scores = self.analyze(text)
        except ClassificationError as e:
            self.logger.error(
                f"Perspective check failed: {e}",
                category=category,
                status_code=e.status_code,
            )
            return False

        flagged = {
            name: value for name, value in scores.items() if value >= self.config.threshold
        }
        if flagged:
            self.logger.warning(
                "Summary rejected by safety gate", category=category, flagged=flagged
            )
            return False

        self.logger.info("Summary passed safety gate", category=category, scores=scores)
        return True
