"""
Helpers for building and sending elastic REST requests
"""

from typing import Any, Optional
from urllib.parse import quote

from elastic_transport import ApiResponse

from elastic_utils.client import ElasticClient

JSON_HEADERS = {"accept": "application/json", "content-type": "application/json"}


def elastic_path(*parts: str) -> str:
    """Build an url path from its parts, e.g. elastic_path("index", "type", "id") == "/index/type/id" """
    return "".join(f"/{quote(str(part), safe='')}" for part in parts)


def elastic_request(
    elastic: ElasticClient,
    method: str,
    path: str,
    params: Optional[dict[str, Any]] = None,
    body: Optional[dict[str, Any]] = None,
) -> ApiResponse[Any]:
    headers = JSON_HEADERS if body is not None else {"accept": "application/json"}
    return elastic.perform_request(method, path, params=params, headers=headers, body=body)
