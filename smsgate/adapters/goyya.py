"""Goyya SMS gateway adapter.

The gateway is a single GET endpoint: credentials and message fields go into
the query string, and the answer is one line of text such as
``OK(12345, 1 message queued)``. See https://www.goyya.com/sms-services.
"""

from __future__ import annotations

import codecs
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote_plus
from zoneinfo import ZoneInfo

import httpx

from smsgate.config import DEFAULT_SEND_TIME_PATTERN, SmsSettings, get_settings
from smsgate.errors import SmsConfigurationError, SmsSendError
from smsgate.types import (
    GoyyaResponse,
    MessageType,
    ResponseParseError,
    SendRequest,
    SendResult,
    SmsAdapter,
)
from smsgate.types.extensions import SUCCESS_PREFIX

logger = logging.getLogger(__name__)

GATEWAY_TIME_ZONE = ZoneInfo("Europe/Berlin")
SEND_NOW_THRESHOLD = timedelta(seconds=60)

# Ask the gateway to report message id, count, limit and status.
RESPONSE_FLAGS: Tuple[Tuple[str, str], ...] = (
    ("getId", "1"),
    ("countMsg", "1"),
    ("getLimit", "1"),
    ("getStatus", "1"),
)


def parse_gateway_response(text: Optional[str]) -> GoyyaResponse:
    """Parse the gateway's text answer into a `GoyyaResponse`.

    Success is only the ``OK`` prefix. The ``(<id>, <count> ...)`` payload is
    best effort: a malformed payload is recorded in `parse_error`, and a
    missing or unbalanced one is skipped. Never raises.
    """
    if text is None or not text.startswith(SUCCESS_PREFIX):
        return GoyyaResponse(response=text)

    message_id: Optional[str] = None
    count: Optional[int] = None
    parse_error: Optional[ResponseParseError] = None
    try:
        i1 = text.find("(")
        i2 = text.find(")")
        if 0 < i1 < i2:
            fields = text[i1 + 1 : i2].split(",")
            message_id = fields[0].strip()
            if len(fields) > 1:
                raw_count = fields[1].strip()
                if raw_count:
                    count = int(raw_count.split(" ", 1)[0].strip())
    except Exception as exc:
        parse_error = ResponseParseError.from_exception(exc)

    return GoyyaResponse(
        response=text,
        id=message_id,
        count=count,
        parse_error=parse_error,
    )


def encode_query_value(value: Optional[str], charset: str) -> str:
    """Form-encode a query value in the gateway's charset.

    Matches ``application/x-www-form-urlencoded`` encoders: space becomes
    ``+``, only ``A-Za-z0-9.-*_`` stay literal, and characters the charset
    cannot represent are sent as ``?``.
    """
    if value is None or not value.strip():
        return ""
    return quote_plus(value, safe="*", encoding=charset, errors="replace").replace("~", "%7E")


def format_send_time(
    send_time: Optional[datetime],
    pattern: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Optional[str]:
    """Return the `time` parameter, or None to send immediately.

    Times within the next 60 seconds count as "now". The value is rendered in
    the gateway's time zone, whatever zone `send_time` was given in.
    """
    if send_time is None:
        return None
    if send_time.tzinfo is None:
        send_time = send_time.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    if send_time <= now + SEND_NOW_THRESHOLD:
        return None
    return send_time.astimezone(GATEWAY_TIME_ZONE).strftime(pattern or DEFAULT_SEND_TIME_PATTERN)


def resolve_message_type(
    message: str,
    default_type: Optional[MessageType],
    max_length_of_one_sms: int,
) -> MessageType:
    if default_type is None or default_type.is_auto:
        if len(message) > max_length_of_one_sms:
            return MessageType.LONG_TEXT
        return MessageType.TEXT
    return default_type


def _require(value: Optional[str], default: Optional[str], name: str) -> str:
    if value is not None and value.strip():
        return value
    if default is not None and default.strip():
        return default
    raise SmsConfigurationError(f"{name} must not be null or blank")


class GoyyaClient(SmsAdapter):
    """Goyya adapter implementing the SmsAdapter protocol.

    Each send is exactly one GET request. Pass `http_client` to reuse a
    configured `httpx.Client` (it is not closed here); otherwise a client is
    created per send from the proxy and TLS settings.
    """

    def __init__(
        self,
        settings: Optional[SmsSettings] = None,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._http_client = http_client
        try:
            codecs.lookup(self.settings.charset)
        except LookupError as exc:
            raise SmsConfigurationError(f"Unknown charset: {self.settings.charset}") from exc

    def send_endpoint(self) -> str:  # type: ignore[override]
        return self.settings.url

    def resolve_request(self, request: SendRequest) -> SendRequest:
        """Fill sender, receiver and message from defaults or fail fast."""
        s = self.settings
        return request.model_copy(
            update={
                "sender": _require(request.sender, s.default_sender, "sender"),
                "receiver": _require(request.receiver, s.default_receiver, "receiver"),
                "message": _require(request.message, s.default_message, "message"),
            }
        )

    def build_url(self, request: SendRequest, now: Optional[datetime] = None) -> str:
        """Build the full gateway URL for an already resolved request."""
        s = self.settings
        message = request.message or ""
        message_type = resolve_message_type(message, s.default_message_type, s.max_length_of_one_sms)
        time = format_send_time(request.send_time, s.send_time_pattern, now=now)

        params: List[str] = [
            f"id={encode_query_value(s.username, s.charset)}",
            f"pw={encode_query_value(s.password, s.charset)}",
            f"sender={encode_query_value(request.sender, s.charset)}",
            f"receiver={encode_query_value(request.receiver, s.charset)}",
            f"msg={encode_query_value(message, s.charset)}",
            f"msgtype={message_type.value}",
        ]
        if time is not None:
            params.append(f"time={time}")
        params.extend(f"{key}={value}" for key, value in RESPONSE_FLAGS)

        separator = "&" if "?" in s.url else "?"
        return s.url + separator + "&".join(params)

    def client_options(self) -> Dict[str, Any]:
        """Keyword arguments for the per-send `httpx.Client`."""
        s = self.settings
        options: Dict[str, Any] = {"verify": not s.insecure_skip_tls_verify}
        if s.uses_proxy:
            proxy_url = f"http://{s.proxy_host}:{s.proxy_port}"
            if s.proxy_username and s.proxy_username.strip():
                options["proxy"] = httpx.Proxy(
                    url=proxy_url,
                    auth=(s.proxy_username, s.proxy_password or ""),
                )
            else:
                options["proxy"] = httpx.Proxy(url=proxy_url)
        return options

    def _get(self, url: str) -> httpx.Response:
        if self._http_client is not None:
            return self._http_client.get(url)
        if self.settings.insecure_skip_tls_verify:
            logger.warning("TLS verification is disabled for %s", self.send_endpoint())
        with httpx.Client(**self.client_options()) as client:
            return client.get(url)

    def send_sms(self, request: SendRequest) -> SendResult:  # type: ignore[override]
        """Send one SMS through the gateway.

        The body is read for every status code; an error status simply gives
        a response text that does not start with ``OK``.
        """
        url = self.build_url(self.resolve_request(request))

        try:
            response = self._get(url)
            text = response.content.decode(self.settings.charset, errors="replace")
        except (httpx.HTTPError, OSError) as exc:
            logger.exception(
                "Sending SMS %s to %s failed", request.request_id, self.send_endpoint()
            )
            raise SmsSendError(f"Sending SMS {request.request_id} failed: {exc}") from exc

        logger.debug(
            "Goyya answered %s for %s: %r", response.status_code, request.request_id, text
        )
        parsed = parse_gateway_response(text)
        return SendResult(
            request=request,
            successfully_sent=parsed.ok,
            extension=parsed,
        )
