from graph_http import DEFAULT_SERVERS, HTTPService, ServerTable, server
from graph_http.servers import server as resolve_server


def test_default_server_table():
    assert DEFAULT_SERVERS.graph_server == "graph.facebook.com"
    assert DEFAULT_SERVERS.rest_server == "api.facebook.com"
    assert DEFAULT_SERVERS.dialog_host == "www.facebook.com"
    assert DEFAULT_SERVERS.host_path_matcher.pattern == r"\.facebook"
    assert DEFAULT_SERVERS.video_replace == "-video.facebook"
    assert DEFAULT_SERVERS.beta_replace == ".beta.facebook"


def test_graph_server_is_default():
    assert server({}) == "graph.facebook.com"
    assert server({"rest_api": False}) == "graph.facebook.com"


def test_rest_server_when_requested():
    assert server({"rest_api": True}) == "api.facebook.com"


def test_beta_tier():
    assert server({"beta": True}) == "graph.beta.facebook.com"
    assert server({"beta": True, "rest_api": True}) == "api.beta.facebook.com"


def test_video_host():
    assert server({"video": True}) == "graph-video.facebook.com"
    assert server({"video": True, "rest_api": True}) == "api-video.facebook.com"


def test_video_and_beta_compose_video_first():
    assert server({"video": True, "beta": True}) == "graph-video.beta.facebook.com"


def test_custom_server_table(monkeypatch):
    monkeypatch.setenv("GRAPH_HTTP_GRAPH_SERVER", "graph.example.facebook.net")
    table = ServerTable.from_env()

    assert table.rest_server == "api.facebook.com"
    assert resolve_server({"beta": True}, table) == "graph.example.beta.facebook.net"


def test_service_configure_changes_hosts():
    service = HTTPService()
    service.configure(graph_server="graph.intern.facebook.com")

    assert service.server({"video": True}) == "graph.intern-video.facebook.com"
    assert server({}) == "graph.facebook.com"
