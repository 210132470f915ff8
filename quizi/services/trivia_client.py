"""
Trivia Client
Fetches question batches from Open Trivia DB over httpx
"""
import logging
from typing import Any, Dict, List

import httpx
from pydantic import ValidationError

from quizi.models.quiz_sessions import TriviaQuestion
from quizi.utils.question_sanitizer import sanitize_question

logger = logging.getLogger(__name__)


class TriviaProviderError(Exception):
    """Raised when the provider is unreachable or returns nothing usable"""
    pass


DEFAULT_API_URL = "https://opentdb.com/api.php"
DEFAULT_TIMEOUT = 10.0  # seconds

# Open Trivia DB response codes
RESPONSE_CODE_MESSAGES = {
    1: "No results for the requested query",
    2: "Invalid parameter sent to the question provider",
    3: "Session token not found",
    4: "Session token exhausted",
    5: "Rate limited by the question provider",
}


class TriviaClient:
    """
    Client for the Open Trivia DB question API

    The httpx.AsyncClient is owned by the caller (created and closed in the
    application lifespan) so one connection pool is shared across requests.
    """

    def __init__(self, http_client: httpx.AsyncClient, api_url: str = DEFAULT_API_URL):
        self.http_client = http_client
        self.api_url = api_url

    async def fetch_questions(self, amount: int) -> List[TriviaQuestion]:
        """
        Fetch and sanitize a batch of questions

        Args:
            amount: Number of questions to request

        Returns:
            Decoded questions; records without question text or a correct
            answer are dropped

        Raises:
            TriviaProviderError: On network failure, timeout, bad status,
                provider error code, or when no usable question remains
        """
        payload = await self._request(amount)

        response_code = payload.get("response_code", 0)
        if response_code:
            message = RESPONSE_CODE_MESSAGES.get(
                response_code, f"Question provider error (code {response_code})"
            )
            logger.error(f"❌ Trivia provider returned code {response_code}: {message}")
            raise TriviaProviderError(message)

        results = payload.get("results")
        if not isinstance(results, list) or not results:
            logger.error("❌ Trivia provider returned no questions")
            raise TriviaProviderError("No questions returned")

        questions = []
        for idx, raw in enumerate(results):
            if not isinstance(raw, dict):
                logger.warning(f"⚠️ Skipping malformed provider record #{idx}")
                continue
            try:
                questions.append(sanitize_question(raw))
            except ValidationError as e:
                logger.warning(f"⚠️ Skipping unusable provider record #{idx}: {e.error_count()} errors")

        if not questions:
            raise TriviaProviderError("No questions returned")

        logger.info(f"📥 Fetched {len(questions)} questions from trivia provider")
        return questions

    async def _request(self, amount: int) -> Dict[str, Any]:
        try:
            response = await self.http_client.get(self.api_url, params={"amount": amount})
            response.raise_for_status()
            payload = response.json()
        except httpx.TimeoutException as e:
            logger.error(f"❌ Trivia provider timed out: {e}")
            raise TriviaProviderError("Question provider timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"❌ Trivia provider request failed: {e}")
            raise TriviaProviderError("Failed to fetch questions from OpenTDB") from e
        except ValueError as e:
            logger.error(f"❌ Trivia provider sent invalid JSON: {e}")
            raise TriviaProviderError("Question provider returned invalid JSON") from e

        if not isinstance(payload, dict):
            raise TriviaProviderError("Question provider returned an unexpected payload")
        return payload
