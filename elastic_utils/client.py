"""
A plain REST client for Elasticsearch, on top of elastic_transport

The elasticsearch client refuses servers that do not identify themselves with an
X-Elastic-Product header, which 1.x and 2.x nodes never send, and it has no methods for the
typed document and mapping endpoints. ElasticClient sends requests as they are given over the
transport (which does the pooling and the retries) and raises the elasticsearch exception for
every error response, so callers handle errors the same way as with the official client.
"""

from typing import Any, Iterable, Mapping, Optional
from urllib.parse import quote

from elastic_transport import (
    ApiResponse,
    HeadApiResponse,
    ListApiResponse,
    ObjectApiResponse,
    TextApiResponse,
    Transport,
    TransportError,
)
from elasticsearch import ApiError
from elasticsearch.exceptions import HTTP_EXCEPTIONS


def _param(value: Any) -> str:
    if isinstance(value, bool):
        value = str(value).lower()
    return quote(str(value), safe=",*")


def query_string(params: Mapping[str, Any]) -> str:
    """Encode request parameters, e.g. {"refresh": True, "version": 3} -> "refresh=true&version=3" """
    return "&".join(f"{k}={_param(v)}" for k, v in params.items())


class ElasticClient:
    def __init__(self, transport: Transport, ignore_status: Iterable[int] = ()):
        self.transport = transport
        self.ignore_status = frozenset(ignore_status)

    def options(self, ignore_status: int | Iterable[int] = ()) -> "ElasticClient":
        """A client on the same transport that returns responses with these statuses instead of raising"""
        if isinstance(ignore_status, int):
            ignore_status = (ignore_status,)
        return ElasticClient(self.transport, ignore_status)

    def perform_request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        body: Optional[Any] = None,
    ) -> ApiResponse[Any]:
        target = f"{path}?{query_string(params)}" if params else path
        meta, response_body = self.transport.perform_request(method, target, headers=headers or {}, body=body)
        # HEAD answers 404 for "does not exist"
        missing = method == "HEAD" and meta.status == 404
        if not (200 <= meta.status < 300 or missing or meta.status in self.ignore_status):
            message = str(response_body)
            if isinstance(response_body, dict):
                message = str(response_body.get("error", message))
            raise HTTP_EXCEPTIONS.get(meta.status, ApiError)(message=message, meta=meta, body=response_body)
        if method == "HEAD":
            return HeadApiResponse(meta=meta)
        if isinstance(response_body, list):
            return ListApiResponse(body=response_body, meta=meta)
        if isinstance(response_body, str):
            return TextApiResponse(body=response_body, meta=meta)
        return ObjectApiResponse(body=response_body or {}, meta=meta)

    def ping(self) -> bool:
        """True if the node answers, False on an error response or when it cannot be reached"""
        try:
            return bool(self.perform_request("HEAD", "/"))
        except (ApiError, TransportError):
            return False

    def close(self) -> None:
        self.transport.close()
