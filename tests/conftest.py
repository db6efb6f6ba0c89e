import pytest

from elastic_utils.config import RetryPolicy, get_settings
from elastic_utils.connection import close_elastic, connect
from elastic_utils.index import create_index_or_update_mappings
from elastic_utils.mapping import define_mapping, int_field_mapping, string_field_mapping, text_field_mapping
from tests.tools import FakeElasticServer

UNITTEST_INDEX = "elastic_utils_unittest"

WIDGET_MAPPING = define_mapping(
    "widget",
    {
        "name": string_field_mapping,
        "description": text_field_mapping,
        "size": int_field_mapping,
    },
)


@pytest.fixture(autouse=True)
def fast_health_checks():
    """Don't wait long for the (fake) cluster to become healthy"""
    settings = get_settings()
    old = settings.health_wait_timeout, settings.health_poll_interval
    settings.health_wait_timeout, settings.health_poll_interval = 0.1, 0.01
    yield settings
    settings.health_wait_timeout, settings.health_poll_interval = old


@pytest.fixture()
def server():
    server = FakeElasticServer()
    server.start()
    yield server
    server.stop()


@pytest.fixture()
def cluster(server):
    return server.cluster


@pytest.fixture()
def elastic(server):
    elastic = connect(server.settings(), RetryPolicy(max_retries=0))
    yield elastic
    close_elastic(elastic)


@pytest.fixture()
def index(elastic, cluster):
    """An index with the widget mapping"""
    create_index_or_update_mappings(elastic, UNITTEST_INDEX, {"number_of_shards": 1}, "widget", WIDGET_MAPPING)
    cluster.calls.clear()
    return UNITTEST_INDEX
