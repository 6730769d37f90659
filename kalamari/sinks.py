"""Finding DOM XSS sinks, and nearby sources, in JavaScript code."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

__all__ = ["SinkType", "SourceType", "DomSink", "SinkAnalyzer"]


class SinkType(Enum):
    """Dangerous operations that user input may reach."""

    EVAL = "Eval"
    FUNCTION_CONSTRUCTOR = "FunctionConstructor"
    SET_TIMEOUT_STRING = "SetTimeoutString"
    SET_INTERVAL_STRING = "SetIntervalString"
    DOCUMENT_WRITE = "DocumentWrite"
    DOCUMENT_WRITELN = "DocumentWriteln"
    INNER_HTML = "InnerHtml"
    OUTER_HTML = "OuterHtml"
    INSERT_ADJACENT_HTML = "InsertAdjacentHtml"
    LOCATION_ASSIGN = "LocationAssign"
    LOCATION_HREF = "LocationHref"
    LOCATION_REPLACE = "LocationReplace"
    WINDOW_OPEN = "WindowOpen"
    JQUERY_HTML = "JQueryHtml"
    JQUERY_APPEND = "JQueryAppend"
    REACT_DANGEROUS_HTML = "ReactDangerousHtml"
    ANGULAR_BYPASS_SECURITY = "AngularBypassSecurity"
    VUE_HTML = "VueHtml"

    def risk_level(self) -> int:
        """Risk from 1 to 10."""
        return _SINK_INFO[self][0]

    def description(self) -> str:
        """Human-readable description."""
        return _SINK_INFO[self][1]


_SINK_INFO = {
    SinkType.EVAL: (10, "Direct JavaScript code execution via eval()"),
    SinkType.FUNCTION_CONSTRUCTOR: (10, "JavaScript code execution via Function constructor"),
    SinkType.SET_TIMEOUT_STRING: (9, "Delayed code execution via setTimeout with string"),
    SinkType.SET_INTERVAL_STRING: (9, "Repeated code execution via setInterval with string"),
    SinkType.DOCUMENT_WRITE: (9, "HTML injection via document.write()"),
    SinkType.DOCUMENT_WRITELN: (9, "HTML injection via document.writeln()"),
    SinkType.INNER_HTML: (8, "HTML injection via innerHTML assignment"),
    SinkType.OUTER_HTML: (8, "HTML injection via outerHTML assignment"),
    SinkType.INSERT_ADJACENT_HTML: (8, "HTML injection via insertAdjacentHTML()"),
    SinkType.LOCATION_ASSIGN: (7, "URL manipulation via location assignment"),
    SinkType.LOCATION_HREF: (7, "URL manipulation via location.href"),
    SinkType.LOCATION_REPLACE: (7, "URL manipulation via location.replace()"),
    SinkType.WINDOW_OPEN: (6, "New window/tab opening via window.open()"),
    SinkType.JQUERY_HTML: (8, "HTML injection via jQuery .html()"),
    SinkType.JQUERY_APPEND: (7, "HTML injection via jQuery .append()"),
    SinkType.REACT_DANGEROUS_HTML: (8, "HTML injection via React dangerouslySetInnerHTML"),
    SinkType.ANGULAR_BYPASS_SECURITY: (9, "Security bypass in Angular"),
    SinkType.VUE_HTML: (8, "HTML injection via Vue v-html directive"),
}


class SourceType(Enum):
    """Places attacker-controlled data can come from."""

    LOCATION_HASH = "LocationHash"
    LOCATION_SEARCH = "LocationSearch"
    LOCATION_HREF = "LocationHref"
    LOCATION_PATHNAME = "LocationPathname"
    DOCUMENT_REFERRER = "DocumentReferrer"
    DOCUMENT_URL = "DocumentUrl"
    DOCUMENT_URI = "DocumentUri"
    WINDOW_NAME = "WindowName"
    DOCUMENT_COOKIE = "DocumentCookie"
    LOCAL_STORAGE = "LocalStorage"
    SESSION_STORAGE = "SessionStorage"
    POST_MESSAGE = "PostMessage"
    WEB_SOCKET_MESSAGE = "WebSocketMessage"

    def pattern(self) -> str:
        """Regular expression matching access to this source."""
        return _SOURCE_PATTERNS[self]


_SOURCE_PATTERNS = {
    SourceType.LOCATION_HASH: r"location\.hash",
    SourceType.LOCATION_SEARCH: r"location\.search",
    SourceType.LOCATION_HREF: r"location\.href",
    SourceType.LOCATION_PATHNAME: r"location\.pathname",
    SourceType.DOCUMENT_REFERRER: r"document\.referrer",
    SourceType.DOCUMENT_URL: r"document\.URL",
    SourceType.DOCUMENT_URI: r"document\.documentURI",
    SourceType.WINDOW_NAME: r"window\.name",
    SourceType.DOCUMENT_COOKIE: r"document\.cookie",
    SourceType.LOCAL_STORAGE: r"localStorage\.",
    SourceType.SESSION_STORAGE: r"sessionStorage\.",
    SourceType.POST_MESSAGE: r"\.data\b",
    SourceType.WEB_SOCKET_MESSAGE: r"\.data\b",
}

_SINK_PATTERNS = (
    (SinkType.EVAL, r"\beval\s*\("),
    (SinkType.FUNCTION_CONSTRUCTOR, r"\bnew\s+Function\s*\("),
    (SinkType.SET_TIMEOUT_STRING, r"""\bsetTimeout\s*\(\s*['"`]"""),
    (SinkType.SET_INTERVAL_STRING, r"""\bsetInterval\s*\(\s*['"`]"""),
    (SinkType.DOCUMENT_WRITE, r"\bdocument\.write\s*\("),
    (SinkType.DOCUMENT_WRITELN, r"\bdocument\.writeln\s*\("),
    (SinkType.INNER_HTML, r"\.innerHTML\s*="),
    (SinkType.OUTER_HTML, r"\.outerHTML\s*="),
    (SinkType.INSERT_ADJACENT_HTML, r"\.insertAdjacentHTML\s*\("),
    (SinkType.LOCATION_ASSIGN, r"\blocation\s*="),
    (SinkType.LOCATION_HREF, r"\blocation\.href\s*="),
    (SinkType.LOCATION_REPLACE, r"\blocation\.replace\s*\("),
    (SinkType.WINDOW_OPEN, r"\bwindow\.open\s*\("),
    (SinkType.JQUERY_HTML, r"\$\([^)]*\)\.html\s*\("),
    (SinkType.JQUERY_APPEND, r"\$\([^)]*\)\.append\s*\("),
    (SinkType.REACT_DANGEROUS_HTML, r"dangerouslySetInnerHTML"),
    (SinkType.ANGULAR_BYPASS_SECURITY, r"bypassSecurityTrust"),
    (SinkType.VUE_HTML, r"v-html\s*="),
)

# Message payloads are too generic to attribute by proximity, so they are not searched.
_SEARCHED_SOURCES = (
    SourceType.LOCATION_HASH,
    SourceType.LOCATION_SEARCH,
    SourceType.LOCATION_HREF,
    SourceType.LOCATION_PATHNAME,
    SourceType.DOCUMENT_REFERRER,
    SourceType.DOCUMENT_URL,
    SourceType.DOCUMENT_URI,
    SourceType.WINDOW_NAME,
    SourceType.DOCUMENT_COOKIE,
    SourceType.LOCAL_STORAGE,
    SourceType.SESSION_STORAGE,
)

_CONTEXT_RADIUS = 100


@dataclass
class DomSink:
    """A sink found in code."""

    sink_type: SinkType
    line: int | None
    column: int | None
    snippet: str
    source: str | None
    risk_level: int


class SinkAnalyzer:
    """Scans JavaScript for dangerous sinks and the sources near them."""

    def __init__(self) -> None:
        self._patterns = [(kind, re.compile(p)) for kind, p in _SINK_PATTERNS]
        self._source_patterns = [(s, re.compile(s.pattern())) for s in _SEARCHED_SOURCES]

    def analyze(self, code: str) -> list[DomSink]:
        """Return every sink in the code, highest risk first."""
        lines = code.split("\n")
        sinks: list[DomSink] = []

        for kind, pattern in self._patterns:
            for match in pattern.finditer(code):
                start, end = match.span()
                line_num = code.count("\n", 0, start) + 1
                line_start = code.rfind("\n", 0, start) + 1
                sinks.append(
                    DomSink(
                        sink_type=kind,
                        line=line_num,
                        column=start - line_start,
                        snippet=lines[line_num - 1].strip(),
                        source=self._find_source_in_context(code, start, end),
                        risk_level=kind.risk_level(),
                    )
                )

        sinks.sort(key=lambda s: s.risk_level, reverse=True)
        return sinks

    def _find_source_in_context(self, code: str, start: int, end: int) -> str | None:
        context = code[max(0, start - _CONTEXT_RADIUS):min(len(code), end + _CONTEXT_RADIUS)]
        for source, pattern in self._source_patterns:
            if pattern.search(context):
                return source.value
        return None

    def has_high_risk_sinks(self, code: str) -> bool:
        """Whether any sink has risk 8 or more."""
        return any(s.risk_level >= 8 for s in self.analyze(code))

    def sinks_above_risk(self, code: str, min_risk: int) -> list[DomSink]:
        """Sinks whose risk is at least min_risk."""
        return [s for s in self.analyze(code) if s.risk_level >= min_risk]