"""
Remote Scoring Service Adapter

Thin client for the hosted livability scoring endpoint. The service
returns an overall score plus the per-category breakdown, blended
server-side with the same WeightVector the map uses locally.

Network and HTTP failures propagate to the caller; the UI layer decides
how to surface them.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from livability_map.models import SubScores, WeightVector
from livability_map.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class RemoteScore:
    """Score record returned by the livability service."""
    address: str
    overall_score: float
    breakdown: SubScores

    @classmethod
    def from_response(cls, address: str, payload: Dict[str, Any]) -> "RemoteScore":
        """
        Parse the service JSON response.

        Raises
        ------
        ValueError
            If the response lacks the overall score or breakdown fields
        """
        try:
            breakdown = payload["breakdown"]
            return cls(
                address=address,
                overall_score=float(payload["overallScore"]),
                breakdown=SubScores(
                    safety=float(breakdown["crimeScore"]),
                    weather=float(breakdown["weatherScore"]),
                    transport=float(breakdown["transportScore"]),
                    family=float(breakdown["familyScore"]),
                )
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"Malformed livability response for '{address}': {exc}") from exc


class LivabilityServiceClient:
    """
    Client for the livability scoring API.

    Parameters
    ----------
    base_url : str
        API root, e.g. "https://example.execute-api.amazonaws.com/prod"
    api_key : str, optional
        Value sent in the `x-api-key` header
    timeout : float, optional
        Request timeout in seconds (default: 10)
    session : requests.Session, optional
        Session to reuse; one is created if omitted
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None
    ):
        if not base_url:
            raise ValueError("base_url is required for the livability service")
        self.base_url = base_url.rstrip("/")
        self.timeout = float(timeout)
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        if api_key:
            self.session.headers.update({"x-api-key": api_key})

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "LivabilityServiceClient":
        remote = config.get("remote", {})
        return cls(
            base_url=remote.get("base_url", ""),
            api_key=remote.get("api_key") or None,
            timeout=float(remote.get("timeout", 10.0))
        )

    def fetch_score(self, address: str, weights: WeightVector) -> RemoteScore:
        """
        Request the weighted livability score for an address or suburb.

        Raises
        ------
        requests.RequestException
            On connection failures or non-2xx responses
        ValueError
            If the response body is malformed
        """
        body = {"address": address, "weights": weights.to_service_payload()}
        logger.info("Requesting livability score for '%s'", address)
        response = self.session.post(
            f"{self.base_url}/livability_score",
            json=body,
            timeout=self.timeout
        )
        response.raise_for_status()
        return RemoteScore.from_response(address, response.json())

    __call__ = fetch_score

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "LivabilityServiceClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
