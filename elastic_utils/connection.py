"""
Sets up the pooled connection to the Elastic server.

A connection is created once per process with connect() and shared by everything that talks
to elastic. Failing to connect is fatal: the caller cannot do anything useful without elastic,
so the failure is raised as ConnectionFailure and not retried here.
"""

import logging
from typing import Optional

from elastic_transport import NodeConfig, Transport

from elastic_utils.client import ElasticClient
from elastic_utils.config import RetryPolicy, Settings, get_settings
from elastic_utils.errors import ConnectionFailure


def connect(settings: Optional[Settings] = None, retry_policy: Optional[RetryPolicy] = None) -> ElasticClient:
    """
    Connect to elastic at settings.elastic_host:settings.elastic_port and check that it responds.
    :param settings: The connection settings, by default the settings read from the environment
    :param retry_policy: How the transport retries failed requests, by default RetryPolicy()
    """
    settings = settings or get_settings()
    retry_policy = retry_policy or RetryPolicy()
    try:
        elastic = _connect_elastic(settings, retry_policy)
        if not elastic.ping():
            raise ConnectionError(f"No response from {settings.elastic_url}")
    except Exception as e:
        raise ConnectionFailure(f"Unable to connect to elasticsearch at {settings.elastic_url}: {e}") from e
    return elastic


def _connect_elastic(settings: Settings, retry_policy: RetryPolicy) -> ElasticClient:
    logging.info(
        f"Connecting to single ES on {settings.elastic_host} {settings.elastic_port} "
        f"using retry policy {retry_policy!r}"
    )
    logging.debug(
        f"Elastic pool size {settings.pool_size} (max threads {settings.max_threads}, "
        f"per route {settings.connections_per_route}), timeout {settings.connection_timeout}s"
    )
    node = NodeConfig(
        "http",
        settings.elastic_host,
        settings.elastic_port,
        # pool size per node; the application can never have more requests in flight than max_threads
        connections_per_node=settings.pool_size,
        request_timeout=settings.connection_timeout,
    )
    transport = Transport(
        [node],
        max_retries=retry_policy.max_retries,
        retry_on_status=retry_policy.retry_on_status,
        retry_on_timeout=retry_policy.retry_on_timeout,
        meta_header=False,
    )
    return ElasticClient(transport)


def close_elastic(elastic: ElasticClient) -> None:
    """Close all pooled connections"""
    elastic.close()
