"""
Versioned document storage

Documents are always written with version_type=external_gte: the version is a revision number
maintained by the caller (the source of truth), not the write order at elastic. Elastic rejects a
write whose version is lower than the stored version with a 409 conflict, which is raised as
WriteConflict unless the caller asks to ignore conflicts. This is how concurrent writers to the
same document are ordered, no locking is needed here.
"""

import logging
from typing import Any, Mapping, Optional

from elasticsearch import ConflictError
from pydantic import BaseModel

from elastic_utils.client import ElasticClient
from elastic_utils.errors import WriteConflict, try_elastic_operation
from elastic_utils.util import elastic_path, elastic_request


class SaveResult(BaseModel):
    id: str
    version: Optional[int] = None
    #: True if the stored document was newer, and the write was dropped because of ignore_conflict
    conflict_ignored: bool = False


def save_elastic_doc(
    elastic: ElasticClient,
    index_name: str,
    type_name: str,
    elastic_id: str,
    doc: Mapping[str, Any],
    version: int,
    ttl: Optional[str | int] = None,
    ignore_conflict: bool = False,
    refresh: bool = False,
) -> SaveResult:
    """
    Save the document in Elasticsearch.

    :param elastic_id: the identifier for the elastic document
    :param doc: the document to save
    :param version: the version of the document, usually a revision id. If the document in elastic has
                    a newer version, WriteConflict is raised, unless ignore_conflict is True
    :param ttl: time to live of the document, e.g. "1d" or a number of milliseconds
    :param ignore_conflict: log a version conflict and return instead of raising WriteConflict
    :param refresh: make the document searchable right away. This has performance implications
                    for the whole cluster and should be used sparingly
    :raises WriteConflict: if the stored version is newer than version
    :raises TransportFailure: for any other failure to store the document
    """
    params: dict[str, Any] = {"version": version, "version_type": "external_gte"}
    if ttl is not None:
        params["ttl"] = ttl
    if refresh:
        params["refresh"] = "true"
    with try_elastic_operation():
        try:
            response = elastic_request(
                elastic, "PUT", elastic_path(index_name, type_name, elastic_id), params=params, body=dict(doc)
            )
        except ConflictError as e:
            if not ignore_conflict:
                raise WriteConflict(f"Save to Elasticsearch failed {e.body}", e.body) from e
            logging.info(f"Ignore conflict: {e.body}")
            return SaveResult(id=elastic_id, conflict_ignored=True)
    return SaveResult(id=elastic_id, version=response.body.get("_version", version))


def get_elastic_doc(elastic: ElasticClient, index_name: str, type_name: str, elastic_id: str) -> Optional[dict]:
    """
    Get a single document, or None if it does not exist.
    Note that mappings have _source disabled by default, so the result often only has the metadata (_version etc.)
    """
    with try_elastic_operation():
        response = elastic_request(
            elastic.options(ignore_status=404), "GET", elastic_path(index_name, type_name, elastic_id)
        )
    if response.meta.status == 404 or not response.body.get("found", False):
        return None
    return dict(response.body)


def delete_by_id(
    elastic: ElasticClient, index_name: str, type_name: str, elastic_id: str, refresh: bool = False
) -> dict[str, Any]:
    """
    Delete a document by its id. Deleting a document that does not exist is not an error.

    :param refresh: make the deletion visible to searches right away. Use with care.
    :returns: the elastic response, with found=False if there was no such document
    """
    params = {"refresh": "true"} if refresh else None
    with try_elastic_operation():
        response = elastic_request(
            elastic.options(ignore_status=404), "DELETE", elastic_path(index_name, type_name, elastic_id), params=params
        )
    return dict(response.body)


def delete_by_query(
    elastic: ElasticClient, index_name: str, type_name: str, query: Mapping[str, Any]
) -> dict[str, Any]:
    """
    Delete all documents matching the query, e.g. {"term": {"name": "foo"}}.
    There is no rollback: documents are deleted as elastic processes them.
    """
    with try_elastic_operation():
        response = elastic_request(
            elastic, "DELETE", elastic_path(index_name, type_name, "_query"), body={"query": dict(query)}
        )
    return dict(response.body)
