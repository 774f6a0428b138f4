"""Dialogflow (api.ai v1) query client."""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from intentbot.core.errors import NLUQueryError, NLUTimeoutError
from intentbot.core.models import NLUResult, NLUStatus

DEFAULT_BASE_URL = "https://api.api.ai/v1"
DEFAULT_API_VERSION = "20150910"
CLIENT_TOKEN_LENGTH = 32


def is_valid_client_token(token: str | None) -> bool:
    """Dialogflow client access tokens are 32 characters long."""
    return bool(token) and len(token.strip()) == CLIENT_TOKEN_LENGTH


class DialogflowClient:
    """NLU port backed by the Dialogflow v1 ``/query`` endpoint.

    Two failure channels are kept apart: a call that cannot complete raises
    ``NLUQueryError``, while a completed call whose payload carries a
    non-200 status is returned as an ``NLUResult`` with that status.
    """

    def __init__(
        self,
        client_token: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        api_version: str = DEFAULT_API_VERSION,
        lang: str = "en",
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client_token = client_token.strip()
        self.api_url = base_url.rstrip("/") + "/query"
        self.api_version = api_version
        self.lang = lang
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def query(self, utterance: str, *, session_id: str) -> NLUResult:
        """
        Send one utterance to Dialogflow.

        Args:
            utterance: Text to classify.
            session_id: Conversation session identifier.

        Returns:
            Parsed NLU result, possibly carrying a non-success status.
        """
        headers = {
            "Authorization": f"Bearer {self.client_token}",
            "Content-Type": "application/json; charset=utf-8",
        }
        body = {
            "query": [utterance],
            "lang": self.lang,
            "sessionId": session_id,
        }

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.post(
                    self.api_url,
                    params={"v": self.api_version},
                    headers=headers,
                    json=body,
                    timeout=self.timeout_seconds,
                )
        except httpx.TimeoutException as e:
            raise NLUTimeoutError(f"Dialogflow request timed out after {self.timeout_seconds}s") from e
        except httpx.HTTPError as e:
            raise NLUQueryError(f"Dialogflow request failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise NLUQueryError(
                f"Dialogflow returned a non-JSON body (HTTP {response.status_code})"
            ) from e

        if not isinstance(data, dict) or not isinstance(data.get("status"), dict):
            raise NLUQueryError(f"Dialogflow returned an unexpected payload (HTTP {response.status_code})")

        result = parse_query_response(data)
        if not result.ok:
            logger.debug(
                "Dialogflow status {} ({}) for HTTP {}",
                result.status_code,
                result.status.error_type,
                response.status_code,
            )
        return result


def parse_query_response(data: dict[str, Any]) -> NLUResult:
    """Convert a Dialogflow v1 query payload into an ``NLUResult``."""
    status_raw = data.get("status") or {}
    try:
        code = int(status_raw.get("code", 0))
    except (TypeError, ValueError) as e:
        raise NLUQueryError(f"Dialogflow status code is not numeric: {status_raw.get('code')!r}") from e

    status = NLUStatus(
        code=code,
        error_type=str(status_raw.get("errorType") or ""),
        error_details=status_raw.get("errorDetails") or None,
    )

    result_raw = data.get("result")
    if not isinstance(result_raw, dict):
        result_raw = {}
    fulfillment = result_raw.get("fulfillment")
    speech = fulfillment.get("speech", "") if isinstance(fulfillment, dict) else ""
    parameters = result_raw.get("parameters")
    score = result_raw.get("score")

    return NLUResult(
        action=str(result_raw.get("action") or ""),
        status=status,
        fulfillment=str(speech or ""),
        parameters=parameters if isinstance(parameters, dict) else {},
        resolved_query=str(result_raw.get("resolvedQuery") or ""),
        score=float(score) if isinstance(score, (int, float)) else None,
    )
