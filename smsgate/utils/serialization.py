"""XML and JSON encoding of the message envelope.

JSON goes through pydantic with camelCase keys. XML uses ElementTree with the
element names other SMS components already exchange::

    <smsSendResponse>
      <request>
        <requestId>...</requestId>
        <sender>bremersee</sender>
        ...
      </request>
      <successfullySent>true</successfullySent>
      <goyyaSmsSendResponse>
        <response>OK(12345, 1 message queued)</response>
        <ID>12345</ID>
        <count>1</count>
      </goyyaSmsSendResponse>
    </smsSendResponse>

The extension element's tag names its type, so decoding never guesses.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Dict, Optional, Type, TypeVar, Union
from xml.etree import ElementTree as ET

from pydantic import BaseModel, ValidationError

from smsgate.errors import SmsError
from smsgate.types import (
    DryRunResponse,
    Extension,
    GoyyaResponse,
    ResponseParseError,
    SendRequest,
    SendResult,
)

T = TypeVar("T", GoyyaResponse, DryRunResponse)

REQUEST_TAG = "smsSendRequest"
RESULT_TAG = "smsSendResponse"
GOYYA_TAG = "goyyaSmsSendResponse"
DRY_RUN_TAG = "dryRunSmsSendResponse"

# Characters XML 1.0 cannot carry, not even as character references
_ILLEGAL_XML_CHARS = re.compile(r"[^\x09\x0a\x0d\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


# -------------------------------------------------
# JSON
# -------------------------------------------------
def to_json(model: BaseModel, indent: Optional[int] = 2) -> str:
    return model.model_dump_json(by_alias=True, indent=indent)


def request_from_json(text: Union[str, bytes]) -> SendRequest:
    return SendRequest.model_validate_json(text)


def result_from_json(text: Union[str, bytes]) -> SendResult:
    return SendResult.model_validate_json(text)


# -------------------------------------------------
# XML encoding
# -------------------------------------------------
def _sub(parent: ET.Element, tag: str, value: Any) -> None:
    if value is None:
        return
    text = str(value)
    bad = _ILLEGAL_XML_CHARS.search(text)
    if bad:
        raise SmsError(f"<{tag}> contains {bad.group()!r}, which XML cannot represent")
    child = ET.SubElement(parent, tag)
    child.text = text


def _extension_element(extension: Extension) -> ET.Element:
    if isinstance(extension, GoyyaResponse):
        el = ET.Element(GOYYA_TAG)
        _sub(el, "response", extension.response)
        _sub(el, "ID", extension.id)
        _sub(el, "count", extension.count)
        if extension.parse_error is not None:
            err = ET.SubElement(el, "responseParsingException")
            _sub(err, "message", extension.parse_error.message)
            _sub(err, "stackTrace", extension.parse_error.stack_trace)
        return el
    if isinstance(extension, DryRunResponse):
        el = ET.Element(DRY_RUN_TAG)
        _sub(el, "detail", extension.detail)
        return el
    raise SmsError(f"Cannot encode extension of type {type(extension).__name__}")


def _request_element(request: SendRequest, tag: str = REQUEST_TAG) -> ET.Element:
    el = ET.Element(tag)
    _sub(el, "requestId", request.request_id)
    _sub(el, "sender", request.sender)
    _sub(el, "receiver", request.receiver)
    _sub(el, "message", request.message)
    if request.send_time is not None:
        _sub(el, "sendTime", request.send_time.isoformat())
    if request.extension is not None:
        el.append(_extension_element(request.extension))
    return el


def _result_element(result: SendResult) -> ET.Element:
    el = ET.Element(RESULT_TAG)
    if result.request is not None:
        el.append(_request_element(result.request, tag="request"))
    _sub(el, "successfullySent", "true" if result.successfully_sent else "false")
    if result.extension is not None:
        el.append(_extension_element(result.extension))
    return el


def to_xml(model: Union[SendRequest, SendResult]) -> str:
    """Encode a request or result as an XML document string."""
    if isinstance(model, SendRequest):
        root = _request_element(model)
    elif isinstance(model, SendResult):
        root = _result_element(model)
    else:
        raise SmsError(f"Cannot encode {type(model).__name__} as XML")
    ET.indent(root)
    # A raw CR only occurs in text and would be read back as LF
    return ET.tostring(root, encoding="unicode").replace("\r", "&#13;")


# -------------------------------------------------
# XML decoding
# -------------------------------------------------
def _text(parent: ET.Element, tag: str) -> Optional[str]:
    child = parent.find(tag)
    if child is None:
        return None
    return child.text or ""


def _extension_from_element(el: ET.Element) -> Extension:
    if el.tag == GOYYA_TAG:
        count = _text(el, "count")
        parse_error: Optional[ResponseParseError] = None
        err = el.find("responseParsingException")
        if err is not None:
            parse_error = ResponseParseError(
                message=_text(err, "message"),
                stack_trace=_text(err, "stackTrace"),
            )
        return GoyyaResponse(
            response=_text(el, "response"),
            id=_text(el, "ID"),
            count=int(count) if count else None,
            parse_error=parse_error,
        )
    if el.tag == DRY_RUN_TAG:
        return DryRunResponse(detail=_text(el, "detail") or "")
    raise SmsError(f"Unknown extension element <{el.tag}>")


def _find_extension(parent: ET.Element) -> Optional[Extension]:
    for child in parent:
        if child.tag in (GOYYA_TAG, DRY_RUN_TAG):
            return _extension_from_element(child)
    return None


def _request_from_element(el: ET.Element) -> SendRequest:
    send_time = _text(el, "sendTime")
    data: Dict[str, Any] = {
        "sender": _text(el, "sender"),
        "receiver": _text(el, "receiver"),
        "message": _text(el, "message"),
        "send_time": datetime.fromisoformat(send_time) if send_time else None,
        "extension": _find_extension(el),
    }
    request_id = _text(el, "requestId")
    if request_id:
        data["request_id"] = request_id
    return SendRequest(**data)


def _parse(text: Union[str, bytes], expected_tag: str) -> ET.Element:
    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        raise SmsError(f"Invalid XML: {exc}") from exc
    if root.tag != expected_tag:
        raise SmsError(f"Expected <{expected_tag}> but got <{root.tag}>")
    return root


def request_from_xml(text: Union[str, bytes]) -> SendRequest:
    return _request_from_element(_parse(text, REQUEST_TAG))


def result_from_xml(text: Union[str, bytes]) -> SendResult:
    root = _parse(text, RESULT_TAG)
    request_el = root.find("request")
    return SendResult(
        request=_request_from_element(request_el) if request_el is not None else None,
        successfully_sent=(_text(root, "successfullySent") or "").strip().lower() == "true",
        extension=_find_extension(root),
    )


# -------------------------------------------------
# Extension transform
# -------------------------------------------------
def transform_extension(value: Any, target: Type[T]) -> Optional[T]:
    """Resolve `value` into the extension type `target`.

    Accepts an instance of `target`, a JSON mapping, an XML element or an XML
    string. Raises `SmsError` when `value` does not describe a `target`.
    """
    if value is None:
        return None
    if isinstance(value, target):
        return value
    if isinstance(value, (str, bytes)):
        try:
            value = ET.fromstring(value)
        except ET.ParseError as exc:
            raise SmsError(f"Invalid XML: {exc}") from exc
    try:
        if isinstance(value, ET.Element):
            resolved = _extension_from_element(value)
        elif isinstance(value, dict):
            resolved = target.model_validate(value)
        elif isinstance(value, BaseModel):
            resolved = target.model_validate(value.model_dump(by_alias=True))
        else:
            raise SmsError(
                f"Cannot transform {type(value).__name__} into {target.__name__}; "
                "expected a mapping, an XML element or an XML string"
            )
    except ValidationError as exc:
        raise SmsError(f"Cannot transform value into {target.__name__}: {exc}") from exc
    if not isinstance(resolved, target):
        raise SmsError(f"Expected {target.__name__} but got {type(resolved).__name__}")
    return resolved
