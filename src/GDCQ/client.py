"""
GDC repository transport.

High level
----------
Every call to the GDC API goes through `RepositoryClient.get_json`:

1) Primary path: GET the URL and decode the JSON body directly.
2) Fallback path, only if the primary path raised a transport or decoding
   error: GET the URL again, decode the raw bytes as UTF-8 text and parse
   JSON from that text.

There are no further retries and no backoff. If the fallback fails too,
`RepositoryTransportError` is raised, chained to the underlying error.

Environment
-----------
GDC_TIMEOUT : Optional timeout in seconds for the primary path (default 60).
              The fallback path uses the transport's own defaults.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, List

import requests

from .errors import RepositoryTransportError

LOGGER = logging.getLogger(__name__)

_GDC_TIMEOUT = float(os.getenv("GDC_TIMEOUT", "60"))


class RepositoryClient:
    """Blocking JSON client for the GDC search endpoints."""

    def __init__(self, timeout: float = _GDC_TIMEOUT):
        self.timeout = timeout

    def get_json(self, url: str) -> Dict[str, Any]:
        try:
            return self._decode_direct(url)
        except (requests.RequestException, ValueError) as e:
            LOGGER.warning(f"Direct JSON decode of {url} failed ({e}); retrying with an explicit fetch")
        try:
            return self._fetch_then_decode(url)
        except (requests.RequestException, ValueError) as e:
            raise RepositoryTransportError(url, e) from e

    def fetch(self, request) -> List[Dict[str, Any]]:
        """
        Run a search request and return its raw `data.hits` records.

        Parameters
        ----------
        request : GDCRequest
            The request produced by `RequestBuilder.build`.

        Returns
        -------
        list of dict
            The hit records, in repository order.

        Raises
        ------
        RepositoryTransportError
            If both transports fail or the payload has no `data.hits` list.
        """
        payload = self.get_json(request.url)
        try:
            hits = payload["data"]["hits"]
        except (KeyError, TypeError) as e:
            raise RepositoryTransportError(request.url, f"unexpected payload, missing {e}") from e
        if not isinstance(hits, list):
            raise RepositoryTransportError(request.url, "data.hits is not a list")
        LOGGER.debug(f"Repository returned {len(hits)} hits")
        return hits

    def _decode_direct(self, url: str) -> Dict[str, Any]:
        resp = requests.get(url, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    @staticmethod
    def _fetch_then_decode(url: str) -> Dict[str, Any]:
        resp = requests.get(url)
        resp.raise_for_status()
        text = resp.content.decode("utf-8")
        return json.loads(text)
