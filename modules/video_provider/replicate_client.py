"""
Replicate predictions API client.

Creates a prediction for a model and polls it until it reaches a terminal
status. No retries: a failed prediction surfaces immediately.
"""

import asyncio
import time
from typing import Any, Dict

import httpx

from shared.errors import GenerationError
from shared.logging import get_logger

logger = get_logger("video_provider.replicate")

REPLICATE_API_BASE = "https://api.replicate.com/v1"
TERMINAL_STATUSES = ("succeeded", "failed", "canceled")


class ReplicateClient:
    """Thin async wrapper around the Replicate REST API."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        api_token: str,
        poll_interval_s: float = 1.5,
        poll_timeout_s: float = 600.0
    ):
        self._http = http
        self._api_token = api_token
        self.poll_interval_s = poll_interval_s
        self.poll_timeout_s = poll_timeout_s

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_token}",
            "Content-Type": "application/json",
        }

    async def _request(self, method: str, url: str, **kwargs) -> Dict[str, Any]:
        try:
            response = await self._http.request(method, url, headers=self._headers(), **kwargs)
        except httpx.HTTPError as e:
            raise GenerationError(f"Replicate request failed: {str(e)}") from e

        if response.status_code >= 400:
            logger.error(f"Replicate request failed {response.status_code}: {response.text}")
            raise GenerationError(f"Replicate API error: {response.status_code} - {response.text}")

        try:
            data = response.json()
        except ValueError as e:
            raise GenerationError("Replicate returned a malformed response") from e
        if not isinstance(data, dict):
            raise GenerationError("Replicate returned a malformed response")
        return data

    async def run(self, model_id: str, model_input: Dict[str, Any]) -> Any:
        """
        Run a model to completion and return its output.

        Args:
            model_id: Model in 'owner/name' form
            model_input: Model input parameters

        Returns:
            The prediction's output field, untouched

        Raises:
            GenerationError: On HTTP errors, failed/canceled predictions or poll timeout
        """
        owner, _, name = model_id.partition("/")
        prediction = await self._request(
            "POST",
            f"{REPLICATE_API_BASE}/models/{owner}/{name}/predictions",
            json={"input": model_input},
        )
        prediction_id = prediction.get("id")
        if not prediction_id:
            raise GenerationError("Replicate did not return a prediction ID")

        logger.info(
            f"Replicate prediction created: {prediction_id}",
            extra={"model_id": model_id, "prediction_id": prediction_id}
        )

        poll_url = (prediction.get("urls") or {}).get("get") or (
            f"{REPLICATE_API_BASE}/predictions/{prediction_id}"
        )
        start = time.monotonic()
        while prediction.get("status") not in TERMINAL_STATUSES:
            if time.monotonic() - start > self.poll_timeout_s:
                raise GenerationError(
                    f"Replicate prediction {prediction_id} timed out after {self.poll_timeout_s:.0f}s"
                )
            await asyncio.sleep(self.poll_interval_s)
            prediction = await self._request("GET", poll_url)
            logger.debug(f"Replicate prediction {prediction_id} status: {prediction.get('status')}")

        status = prediction.get("status")
        if status != "succeeded":
            error_detail = prediction.get("error") or "no error detail"
            logger.error(
                f"Replicate prediction {prediction_id} {status}: {error_detail}",
                extra={"model_id": model_id, "prediction_id": prediction_id}
            )
            raise GenerationError(f"Replicate prediction {status}: {error_detail}")

        logger.info(
            f"Replicate prediction succeeded: {prediction_id}",
            extra={"model_id": model_id, "elapsed_s": round(time.monotonic() - start, 2)}
        )
        return prediction.get("output")
