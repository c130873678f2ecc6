import pytest

from graph_http import http_service


@pytest.fixture(autouse=True)
def restore_http_service():
    saved = http_service.snapshot()
    yield
    http_service.restore(saved)
