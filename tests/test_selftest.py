#!/usr/bin/env python3
"""
Tests for the 3-step self-test
"""

from bitget_uta.selftest import UTASelfTest


def _queue_all_ok(transport):
    transport.queue_data([{"symbol": "BTCUSDT", "lastPrice": "30000"}])
    transport.queue_data({"assetMode": "union", "holdingMode": "one_way_mode"})
    transport.queue_data({"accountEquity": "100", "assets": [{"coin": "USDT"}]})


def test_all_steps_pass(client, transport):
    _queue_all_ok(transport)
    selftest = UTASelfTest(client)

    results = selftest.run_all_tests()

    assert [r.success for r in results] == [True, True, True]
    assert selftest.passed
    assert results[0].details["last_price"] == "30000"
    assert results[1].details["asset_mode"] == "union"
    assert results[2].details["asset_count"] == 1
    assert "ACCESS-SIGN" not in transport.calls[0]["headers"]
    assert "ACCESS-SIGN" in transport.calls[1]["headers"]


def test_network_failure_stops_at_step_one(client, transport):
    transport.queue(503, "maintenance")
    selftest = UTASelfTest(client)

    results = selftest.run_all_tests()

    assert len(results) == 1
    assert not selftest.passed
    assert results[0].http_status == 503
    assert "base_url" in results[0].error_hint
    assert len(transport.calls) == 1


def test_auth_failure_reports_code_and_hint(client, transport):
    transport.queue_data([])
    transport.queue_data(code="40009", msg="sign signature error")
    selftest = UTASelfTest(client)

    results = selftest.run_all_tests()

    assert len(results) == 2
    assert results[1].api_code == "40009"
    assert results[1].api_msg == "sign signature error"
    assert "Signature mismatch" in results[1].error_hint
    history = selftest.get_error_history()
    assert history[0]["code"] == "40009"
    assert results[1].to_dict()["step"] == "2_account_settings_signed"


def test_missing_credentials_fail_step_two_without_request(public_client, transport):
    transport.queue_data([])
    selftest = UTASelfTest(public_client)

    results = selftest.run_all_tests()

    assert results[0].success
    assert not results[1].success
    assert "Credentials not configured" in results[1].error_hint
    assert len(transport.calls) == 1
