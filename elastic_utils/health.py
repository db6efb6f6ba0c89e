"""
Health of the elastic cluster

The cluster health call asks elastic to wait up to 10 seconds for at least yellow status.
On top of that, health() puts a client side deadline of 12 seconds on the whole check,
so a hanging network call cannot block the caller either. An unhealthy, unreachable or slow
cluster is reported as ElasticHealth(ok=False, ...), never raised.
"""

import logging
import threading
import time
from typing import Any, Optional

from pydantic import BaseModel

from elastic_utils.client import ElasticClient
from elastic_utils.config import get_settings
from elastic_utils.errors import ClusterUnhealthy
from elastic_utils.util import elastic_request

HEALTHY_STATUSES = {"green", "yellow"}


class ElasticHealth(BaseModel):
    ok: bool
    problem: Optional[dict[str, Any]] = None


def get_elastic_health(elastic: ElasticClient) -> dict[str, Any]:
    """
    Returns the elastic health by calling the elasticsearch cluster health api.
    Elastic answers 408 if the wait for yellow timed out, that body still has the (red) status.
    """
    try:
        response = elastic_request(
            elastic.options(ignore_status=408),
            "GET",
            "/_cluster/health",
            params={"wait_for_status": "yellow", "timeout": "10s"},
        )
        return dict(response.body)
    except Exception as e:
        return {
            "status": "Inaccessible",
            "problem": f"Unable to get elasticsearch cluster health, caught exception: {e}",
        }


def check_health(elastic: ElasticClient) -> ElasticHealth:
    health_detail = get_elastic_health(elastic)
    if health_detail.get("status") in HEALTHY_STATUSES:
        return ElasticHealth(ok=True)
    return ElasticHealth(ok=False, problem=health_detail)


def health(elastic: ElasticClient, timeout: Optional[float] = None) -> ElasticHealth:
    """
    Returns the health of elastic, giving up after timeout seconds (default: settings.health_timeout).
    The health request itself is left to finish on a daemon thread when the deadline passes,
    so it never keeps the process alive.
    """
    if timeout is None:
        timeout = get_settings().health_timeout
    results: list[ElasticHealth] = []
    worker = threading.Thread(
        target=lambda: results.append(check_health(elastic)), name="elastic-health", daemon=True
    )
    worker.start()
    worker.join(timeout)
    if results:
        result = results[0]
    else:
        result = ElasticHealth(
            ok=False, problem={"status": "Timeout", "problem": f"Elastic health check timed out after {timeout}s"}
        )
    if not result.ok:
        logging.warning(f"Elasticsearch is not healthy: {result.problem}")
    return result


def wait_for_healthy_elastic(
    elastic: ElasticClient, max_wait: Optional[float] = None, poll_interval: Optional[float] = None
) -> ElasticHealth:
    """
    Block until elastic reports healthy, e.g. after creating an index.
    :raises ClusterUnhealthy: if elastic is still unhealthy after max_wait seconds
    """
    settings = get_settings()
    max_wait = settings.health_wait_timeout if max_wait is None else max_wait
    poll_interval = settings.health_poll_interval if poll_interval is None else poll_interval
    deadline = time.monotonic() + max_wait
    while True:
        result = health(elastic)
        if result.ok:
            return result
        if time.monotonic() + poll_interval > deadline:
            raise ClusterUnhealthy(f"Elasticsearch did not become healthy within {max_wait}s", body=result.problem)
        time.sleep(poll_interval)
