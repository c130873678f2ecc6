from graph_http.options import compose_options, merge_ssl, transport_options


def test_call_options_override_defaults_shallowly():
    defaults = {"proxy": "http://p1/", "request": {"timeout": 3, "open_timeout": 1}}

    options = compose_options(defaults, {"request": {"timeout": 10}})

    assert options["proxy"] == "http://p1/"
    assert options["request"] == {"timeout": 10}


def test_ssl_merges_recursively():
    defaults = {"ssl": {"ca_file": "/etc/ca.pem", "verify": True}}

    options = compose_options(defaults, {"ssl": {"verify": False}})

    assert options["ssl"] == {"ca_file": "/etc/ca.pem", "verify": False}


def test_inputs_are_not_mutated():
    defaults = {"ssl": {"ca_file": "/etc/ca.pem"}}
    call = {"ca_path": "/etc/certs", "typhoeus_options": {"proxy": "http://q/"}}

    compose_options(defaults, call, token="T")

    assert defaults == {"ssl": {"ca_file": "/etc/ca.pem"}}
    assert call == {"ca_path": "/etc/certs", "typhoeus_options": {"proxy": "http://q/"}}


def test_typhoeus_options_are_spliced_and_removed():
    options = compose_options({}, {"typhoeus_options": {"proxy": "http://q/"}})

    assert options["proxy"] == "http://q/"
    assert "typhoeus_options" not in options


def test_explicit_call_keys_win_over_typhoeus_options():
    options = compose_options({}, {"proxy": "http://a/", "typhoeus_options": {"proxy": "http://b/"}})

    assert options["proxy"] == "http://a/"


def test_flat_ssl_keys_move_under_ssl():
    options = compose_options(
        {"ssl": {"verify": True}},
        {"ca_path": "/etc/ca", "ca_file": "/etc/ca.pem", "verify_mode": 0},
    )

    assert options["ssl"] == {
        "verify": True,
        "ca_path": "/etc/ca",
        "ca_file": "/etc/ca.pem",
        "verify_mode": 0,
    }
    for key in ("ca_path", "ca_file", "verify_mode"):
        assert key not in options


def test_token_forces_ssl_verification():
    options = compose_options({"use_ssl": False}, {"use_ssl": False}, token="foo")

    assert options["ssl"] == {"verify": True}
    assert options["use_ssl"] is True


def test_token_overrides_disabled_verification():
    options = compose_options({}, {"ssl": {"verify": False}}, token="foo")

    assert options["ssl"]["verify"] is True


def test_token_keeps_custom_verifier():
    options = compose_options({}, {"ssl": {"verify": "/etc/bundle.pem"}}, token="foo")

    assert options["ssl"]["verify"] == "/etc/bundle.pem"


def test_use_ssl_defaults_verify():
    assert compose_options({"use_ssl": True})["ssl"] == {"verify": True}


def test_use_ssl_keeps_explicit_verify():
    options = compose_options({"use_ssl": True, "ssl": {"verify": False}})

    assert options["ssl"] == {"verify": False}


def test_no_ssl_without_token_or_use_ssl():
    assert "ssl" not in compose_options({}, {})


def test_composite_keeps_routing_flags():
    options = compose_options({"a": "a"}, {"a": 2, "c": "3", "beta": True})

    assert options == {"a": 2, "c": "3", "beta": True}


def test_transport_options_drop_unknown_keys(caplog):
    options = {"proxy": "http://p/", "invalid": "fake", "rest_api": True, "timeout": 4}

    with caplog.at_level("DEBUG", logger="graph_http.options"):
        filtered = transport_options(options)

    assert filtered == {"proxy": "http://p/", "timeout": 4}
    assert "invalid" in caplog.text


def test_merge_ssl_handles_missing_sides():
    assert merge_ssl(None, {"verify": True}) == {"verify": True}
    assert merge_ssl({"ca_file": "x"}, None) == {"ca_file": "x"}
