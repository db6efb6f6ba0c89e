"""
Errors raised by elastic-utils

Every failure has its own exception class, so callers can tell a version conflict
from a broken connection without inspecting messages. All of them derive from
ElasticUtilsError and carry an ErrorKind and, where the engine sent one, the error body.

An unhealthy cluster is not an error: the health functions return an ElasticHealth record instead.
"""

from contextlib import contextmanager
from enum import Enum
from typing import Any, Iterator

from elasticsearch import ApiError, TransportError


class ErrorKind(str, Enum):
    connection_failure = "connection_failure"
    mapping_update_rejected = "mapping_update_rejected"
    write_conflict = "write_conflict"
    transport_failure = "transport_failure"
    cluster_unhealthy = "cluster_unhealthy"


class ElasticUtilsError(Exception):
    kind: ErrorKind

    def __init__(self, message: str, body: Any = None):
        super().__init__(message)
        self.message = message
        self.body = body


class ConnectionFailure(ElasticUtilsError):
    """Could not establish a connection with elastic. Fatal, not retried."""

    kind = ErrorKind.connection_failure


class MappingUpdateRejected(ElasticUtilsError):
    """Elastic declined a mapping update. The migration needs to be redesigned, not retried."""

    kind = ErrorKind.mapping_update_rejected


class WriteConflict(ElasticUtilsError):
    """The supplied version is older than the stored version of the document"""

    kind = ErrorKind.write_conflict


class TransportFailure(ElasticUtilsError):
    """Any other error reported by elastic, or a network fault"""

    kind = ErrorKind.transport_failure


class ClusterUnhealthy(ElasticUtilsError):
    kind = ErrorKind.cluster_unhealthy


def error_body(e: Exception) -> Any:
    """The error body sent by elastic, or the exception message for network faults"""
    if isinstance(e, ApiError):
        return e.body
    return str(e)


@contextmanager
def try_elastic_operation() -> Iterator[None]:
    """
    Convert elasticsearch exceptions raised in the block into TransportFailure,
    so callers never have to deal with transport specific error types.

    with try_elastic_operation():
        elastic_request(elastic, "POST", "/my_index/_refresh")
    """
    try:
        yield
    except (ApiError, TransportError) as e:
        body = error_body(e)
        raise TransportFailure(f"Call to Elasticsearch caught exception {body}", body=body) from e
