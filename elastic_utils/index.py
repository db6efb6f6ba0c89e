"""
Index management

create_index_or_update_mappings() brings an elastic index in line with a mapping defined with
elastic_utils.mapping: a missing index is created, an existing one gets its mappings updated.
Mapping updates are checked for conflicts by elastic, so a change to the meaning of an existing
field is rejected (MappingUpdateRejected) instead of silently merged.
"""

import logging
from typing import Any, Mapping, Optional

from elasticsearch import ApiError, TransportError

from elastic_utils.client import ElasticClient
from elastic_utils.errors import MappingUpdateRejected, error_body, try_elastic_operation
from elastic_utils.health import wait_for_healthy_elastic
from elastic_utils.util import elastic_path, elastic_request


def index_exists(elastic: ElasticClient, index_name: str) -> bool:
    with try_elastic_operation():
        return bool(elastic_request(elastic, "HEAD", elastic_path(index_name)))


def refresh_index(elastic: ElasticClient, index_name: str) -> None:
    """
    Refresh the elasticsearch index, so all documents written so far are visible to searches
    """
    with try_elastic_operation():
        elastic_request(elastic, "POST", elastic_path(index_name, "_refresh"))


def create_index_or_update_mappings(
    elastic: ElasticClient,
    index_name: str,
    index_settings: Optional[Mapping[str, Any]],
    type_name: str,
    mappings: Mapping[str, Any],
) -> None:
    """
    Creates the index needed in Elasticsearch for data storage or updates its mappings.

    :param index_name: the name of the index to use in elastic search
    :param index_settings: index settings such as number_of_shards, passed as the "index" settings
    :param type_name: the name of the document type in the mapping
    :param mappings: the mapping for the type, as returned by define_mapping
    """
    if index_exists(elastic, index_name):
        logging.info(f"Updating {index_name} mappings and settings")
        _update_mappings(elastic, index_name, type_name, mappings)
    else:
        logging.info(f"Creating {index_name} index")
        body = {"settings": {"index": dict(index_settings or {})}, "mappings": dict(mappings)}
        with try_elastic_operation():
            elastic_request(elastic, "PUT", elastic_path(index_name), body=body)
        # a new index is unavailable until its shards are allocated
        wait_for_healthy_elastic(elastic)
    refresh_index(elastic, index_name)


def _update_mappings(elastic: ElasticClient, index_name: str, type_name: str, mappings: Mapping[str, Any]) -> None:
    try:
        response = elastic_request(
            elastic,
            "PUT",
            elastic_path(index_name, "_mapping", type_name),
            params={"ignore_conflicts": "false"},
            body=dict(mappings),
        )
    except (ApiError, TransportError) as e:
        body = error_body(e)
        raise MappingUpdateRejected(f"Elasticsearch rejected the mapping update for {index_name}: {body}", body) from e
    if response.body != {"acknowledged": True}:
        raise MappingUpdateRejected(
            f"Unexpected response when updating elastic mappings: {response.body!r}", response.body
        )


def delete_index(elastic: ElasticClient, index_name: str, ignore_missing: bool = False) -> None:
    """
    Delete an index
    :param ignore_missing: If True, do not throw exception if index does not exist
    """
    _es = elastic.options(ignore_status=404) if ignore_missing else elastic
    with try_elastic_operation():
        elastic_request(_es, "DELETE", elastic_path(index_name))


def reset(
    elastic: ElasticClient,
    index_name: str,
    index_settings: Optional[Mapping[str, Any]],
    type_name: str,
    mappings: Mapping[str, Any],
) -> None:
    """
    Development time helper to delete an index and recreate it to empty all data.
    Never use this on an index with data you want to keep.
    """
    if index_exists(elastic, index_name):
        logging.info(f"Deleting the {index_name} index")
        delete_index(elastic, index_name)
    create_index_or_update_mappings(elastic, index_name, index_settings, type_name, mappings)


def create_index_alias(elastic: ElasticClient, index_name: str, alias: str) -> None:
    """
    Point the alias at the index. The update is atomic, so clients using the alias never see a missing index.
    """
    actions = [{"add": {"index": index_name, "alias": alias}}]
    with try_elastic_operation():
        elastic_request(elastic, "POST", "/_aliases", body={"actions": actions})
