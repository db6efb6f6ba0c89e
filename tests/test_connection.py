import pytest

from elastic_utils.client import ElasticClient
from elastic_utils.config import RetryPolicy, Settings
from elastic_utils.connection import close_elastic, connect
from elastic_utils.documents import save_elastic_doc
from elastic_utils.errors import ConnectionFailure, ErrorKind
from elastic_utils.health import health
from tests.tools import unused_port


def test_connect(server, cluster):
    """The fake node answers like elastic 1.x, without a product header"""
    elastic = connect(server.settings(), RetryPolicy(max_retries=5, retry_on_timeout=True))
    assert isinstance(elastic, ElasticClient)
    assert cluster.calls == [("HEAD", "/", {}, None)]
    (node,) = elastic.transport.node_pool.all()
    assert (node.config.host, node.config.port) == ("127.0.0.1", server.server_address[1])
    assert node.config.connections_per_node == 10
    assert node.config.request_timeout == 300
    assert elastic.transport.max_retries == 5
    assert elastic.transport.retry_on_timeout is True
    close_elastic(elastic)


def test_pool_bounded_by_threads(server):
    elastic = connect(server.settings(max_threads=3))
    (node,) = elastic.transport.node_pool.all()
    assert node.config.connections_per_node == 3
    close_elastic(elastic)


def test_connect_unreachable():
    settings = Settings(elastic_host="127.0.0.1", elastic_port=unused_port())
    with pytest.raises(ConnectionFailure) as e:
        connect(settings, RetryPolicy(max_retries=0))
    assert e.value.kind == ErrorKind.connection_failure
    assert settings.elastic_url in e.value.message


def test_requests_on_the_wire(elastic, cluster, index):
    """Query parameters and headers as elastic receives them"""
    save_elastic_doc(elastic, index, "widget", "w1", {"name": "foo"}, 7, ttl="1d", refresh=True)
    method, path, params, body = cluster.calls[-1]
    assert (method, path) == ("PUT", f"/{index}/widget/w1")
    assert params == {"version": "7", "version_type": "external_gte", "ttl": "1d", "refresh": "true"}
    assert body == {"name": "foo"}
    headers = cluster.headers[-1]
    assert headers["content-type"] == "application/json"
    assert headers["accept"] == "application/json"
    assert health(elastic).ok
    assert cluster.calls[-1][:3] == ("GET", "/_cluster/health", {"wait_for_status": "yellow", "timeout": "10s"})


def test_close(elastic):
    assert elastic.ping()
    close_elastic(elastic)
    assert not elastic.ping()
