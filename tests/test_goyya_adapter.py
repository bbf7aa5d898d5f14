from __future__ import annotations

from datetime import datetime, timedelta, timezone

import httpx
import pytest
import respx

from smsgate.adapters.goyya import (
    GoyyaClient,
    encode_query_value,
    format_send_time,
    resolve_message_type,
)
from smsgate.errors import SmsConfigurationError, SmsSendError
from smsgate.types import GoyyaResponse, MessageType, SendRequest
from tests.conftest import GOYYA_URL, make_settings


def sent_query(route: respx.Route) -> str:
    return route.calls.last.request.url.query.decode("ascii")


def query_params(url: str) -> dict[str, str]:
    query = url.split("?", 1)[1]
    return dict(pair.split("=", 1) for pair in query.split("&"))


# -------------------------------------------------
# Request building
# -------------------------------------------------
def test_build_url_contains_all_parameters_in_order() -> None:
    adapter = GoyyaClient(make_settings())
    request = adapter.resolve_request(
        SendRequest(sender="bremersee", receiver="0123456789", message="Hello World")
    )

    url = adapter.build_url(request)

    assert url == (
        f"{GOYYA_URL}?id=user&pw=secret&sender=bremersee&receiver=0123456789"
        "&msg=Hello+World&msgtype=t&getId=1&countMsg=1&getLimit=1&getStatus=1"
    )


def test_build_url_appends_to_existing_query() -> None:
    adapter = GoyyaClient(make_settings(url=f"{GOYYA_URL}?route=eu"))
    request = adapter.resolve_request(SendRequest(sender="a", receiver="b", message="c"))

    assert adapter.build_url(request).startswith(f"{GOYYA_URL}?route=eu&id=user&pw=secret&")


def test_values_are_encoded_as_latin1() -> None:
    assert encode_query_value("Grüße aus Köln", "ISO-8859-1") == "Gr%FC%DFe+aus+K%F6ln"


def test_unencodable_characters_become_question_marks() -> None:
    assert encode_query_value("5 €", "ISO-8859-1") == "5+%3F"


def test_form_encoding_safe_set() -> None:
    assert encode_query_value("a.b-c*d_e~f&g=h", "ISO-8859-1") == "a.b-c*d_e%7Ef%26g%3Dh"


def test_utf8_charset_is_configurable() -> None:
    assert encode_query_value("ü", "UTF-8") == "%C3%BC"


@pytest.mark.parametrize("value", [None, "", "   "])
def test_blank_values_encode_to_empty(value: str | None) -> None:
    assert encode_query_value(value, "ISO-8859-1") == ""


def test_unknown_charset_is_a_configuration_error() -> None:
    with pytest.raises(SmsConfigurationError):
        GoyyaClient(make_settings(charset="no-such-charset"))


# -------------------------------------------------
# Defaults
# -------------------------------------------------
def test_defaults_fill_missing_fields() -> None:
    adapter = GoyyaClient(
        make_settings(
            default_sender="bremersee",
            default_receiver="0123456789",
            default_message="Ping",
        )
    )

    request = adapter.resolve_request(SendRequest(sender=" ", message=""))
    params = query_params(adapter.build_url(request))

    assert params["sender"] == "bremersee"
    assert params["receiver"] == "0123456789"
    assert params["msg"] == "Ping"


def test_request_values_win_over_defaults() -> None:
    adapter = GoyyaClient(make_settings(default_sender="bremersee"))

    request = adapter.resolve_request(SendRequest(sender="other", receiver="1", message="x"))

    assert request.sender == "other"


@pytest.mark.parametrize("missing", ["sender", "receiver", "message"])
@respx.mock
def test_missing_field_without_default_fails_before_network(missing: str) -> None:
    route = respx.get(url__startswith=GOYYA_URL).mock(return_value=httpx.Response(200, text="OK"))
    fields = {"sender": "a", "receiver": "b", "message": "c"}
    fields[missing] = None
    adapter = GoyyaClient(make_settings())

    with pytest.raises(SmsConfigurationError, match=missing):
        adapter.send_sms(SendRequest(**fields))

    assert not route.called


# -------------------------------------------------
# Send time
# -------------------------------------------------
NOW = datetime(2026, 1, 15, 11, 0, tzinfo=timezone.utc)


def test_send_time_within_threshold_is_send_now() -> None:
    assert format_send_time(NOW + timedelta(seconds=30), now=NOW) is None
    assert format_send_time(NOW + timedelta(seconds=60), now=NOW) is None
    assert format_send_time(NOW - timedelta(hours=1), now=NOW) is None
    assert format_send_time(None, now=NOW) is None


def test_send_time_is_rendered_in_berlin_time() -> None:
    # 11:05 UTC is 12:05 CET
    assert format_send_time(NOW + timedelta(minutes=5), now=NOW) == "120515012026"


def test_send_time_follows_daylight_saving() -> None:
    summer = datetime(2026, 7, 1, 10, 0, tzinfo=timezone.utc)
    assert format_send_time(summer + timedelta(minutes=5), now=summer) == "120501072026"


def test_send_time_ignores_callers_time_zone() -> None:
    new_york = timezone(timedelta(hours=-5))
    send_time = (NOW + timedelta(minutes=5)).astimezone(new_york)

    assert format_send_time(send_time, now=NOW) == "120515012026"


def test_send_time_pattern_is_configurable() -> None:
    assert format_send_time(NOW + timedelta(minutes=5), "%Y-%m-%d %H:%M", now=NOW) == "2026-01-15 12:05"


def test_build_url_with_real_clock() -> None:
    adapter = GoyyaClient(make_settings())
    soon = datetime.now(timezone.utc) + timedelta(seconds=30)
    later = datetime.now(timezone.utc) + timedelta(minutes=5)

    url_soon = adapter.build_url(SendRequest(sender="a", receiver="b", message="c", send_time=soon))
    url_later = adapter.build_url(SendRequest(sender="a", receiver="b", message="c", send_time=later))

    assert "time" not in query_params(url_soon)
    time_value = query_params(url_later)["time"]
    assert len(time_value) == 12 and time_value.isdigit()


# -------------------------------------------------
# Message type
# -------------------------------------------------
def test_message_type_switches_to_long_text_above_limit() -> None:
    assert resolve_message_type("x" * 153, MessageType.TEXT, 153) is MessageType.TEXT
    assert resolve_message_type("x" * 154, MessageType.TEXT, 153) is MessageType.LONG_TEXT
    assert resolve_message_type("short", MessageType.LONG_TEXT, 153) is MessageType.TEXT
    assert resolve_message_type("x" * 200, None, 153) is MessageType.LONG_TEXT


def test_blink_and_flash_are_sent_verbatim() -> None:
    assert resolve_message_type("x" * 500, MessageType.FLASH, 153) is MessageType.FLASH
    assert resolve_message_type("hi", MessageType.BLINK, 153) is MessageType.BLINK


def test_configured_message_type_is_case_insensitive() -> None:
    adapter = GoyyaClient(make_settings(default_message_type="F", max_length_of_one_sms=10))
    url = adapter.build_url(SendRequest(sender="a", receiver="b", message="c"))

    assert query_params(url)["msgtype"] == "f"


def test_custom_max_length() -> None:
    adapter = GoyyaClient(make_settings(max_length_of_one_sms=10))
    url = adapter.build_url(SendRequest(sender="a", receiver="b", message="x" * 11))

    assert query_params(url)["msgtype"] == "c"


# -------------------------------------------------
# Transport
# -------------------------------------------------
@respx.mock
def test_send_success() -> None:
    route = respx.get(url__startswith=GOYYA_URL).mock(
        return_value=httpx.Response(200, content=b"OK(12345, 1 message queued)")
    )
    adapter = GoyyaClient(make_settings())

    result = adapter.send_sms(SendRequest(sender="bremersee", receiver="0123456789", message="Grüße"))

    assert route.called
    query = sent_query(route)
    assert "msg=Gr%FC%DFe" in query
    assert query.endswith("getId=1&countMsg=1&getLimit=1&getStatus=1")
    assert result.successfully_sent
    assert isinstance(result.extension, GoyyaResponse)
    assert result.extension.id == "12345"
    assert result.extension.count == 1
    assert result.request is not None and result.request.sender == "bremersee"


@respx.mock
def test_result_keeps_request_without_defaults() -> None:
    route = respx.get(url__startswith=GOYYA_URL).mock(return_value=httpx.Response(200, text="OK"))
    adapter = GoyyaClient(make_settings(default_sender="bremersee"))
    request = SendRequest(receiver="0123456789", message="Hello")

    result = adapter.send_sms(request)

    assert "sender=bremersee" in sent_query(route)
    assert result.request == request
    assert result.request.sender is None  # type: ignore[union-attr]


@respx.mock
def test_rejected_message_is_not_an_exception() -> None:
    respx.get(url__startswith=GOYYA_URL).mock(
        return_value=httpx.Response(200, content=b"ERROR: invalid receiver")
    )
    adapter = GoyyaClient(make_settings())

    result = adapter.send_sms(SendRequest(sender="a", receiver="b", message="c"))

    assert not result.successfully_sent
    assert isinstance(result.extension, GoyyaResponse)
    assert result.extension.response == "ERROR: invalid receiver"


@respx.mock
def test_error_status_body_is_still_parsed() -> None:
    respx.get(url__startswith=GOYYA_URL).mock(
        return_value=httpx.Response(500, content=b"Server Fehler: \xfcberlastet")
    )
    adapter = GoyyaClient(make_settings())

    result = adapter.send_sms(SendRequest(sender="a", receiver="b", message="c"))

    assert not result.successfully_sent
    assert result.extension.response == "Server Fehler: überlastet"  # type: ignore[union-attr]


@respx.mock
def test_transport_failure_raises_send_error() -> None:
    respx.get(url__startswith=GOYYA_URL).mock(side_effect=httpx.ConnectError)
    adapter = GoyyaClient(make_settings())

    with pytest.raises(SmsSendError) as exc_info:
        adapter.send_sms(SendRequest(sender="a", receiver="b", message="c"))

    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


@respx.mock
def test_injected_http_client_is_used() -> None:
    route = respx.get(url__startswith=GOYYA_URL).mock(return_value=httpx.Response(200, text="OK"))
    with httpx.Client() as http_client:
        adapter = GoyyaClient(make_settings(), http_client=http_client)
        result = adapter.send_sms(SendRequest(sender="a", receiver="b", message="c"))
        assert not http_client.is_closed

    assert route.called
    assert result.successfully_sent


# -------------------------------------------------
# Proxy and TLS options
# -------------------------------------------------
def test_tls_is_verified_by_default() -> None:
    options = GoyyaClient(make_settings()).client_options()

    assert options == {"verify": True}


def test_insecure_flag_disables_verification() -> None:
    options = GoyyaClient(make_settings(insecure_skip_tls_verify=True)).client_options()

    assert options["verify"] is False


def test_proxy_without_credentials() -> None:
    options = GoyyaClient(make_settings(proxy_host="proxy.local", proxy_port=3128)).client_options()

    proxy = options["proxy"]
    assert isinstance(proxy, httpx.Proxy)
    assert proxy.url == httpx.URL("http://proxy.local:3128")
    assert proxy.auth is None


def test_proxy_with_basic_credentials() -> None:
    options = GoyyaClient(
        make_settings(proxy_host="proxy.local", proxy_port=3128, proxy_username="alice")
    ).client_options()

    proxy = options["proxy"]
    assert proxy.auth == ("alice", "")
    assert proxy.raw_auth == (b"alice", b"")


def test_proxy_password_is_passed_on() -> None:
    options = GoyyaClient(
        make_settings(
            proxy_host="proxy.local", proxy_port=3128, proxy_username="alice", proxy_password="pw"
        )
    ).client_options()

    assert options["proxy"].raw_auth == (b"alice", b"pw")


def test_proxy_needs_host_and_port() -> None:
    options = GoyyaClient(make_settings(proxy_host="proxy.local")).client_options()

    assert "proxy" not in options
