"""Content Security Policy parsing and bypass detection."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

__all__ = [
    "BypassKind",
    "CspBypass",
    "CspAnalysis",
    "CspAnalyzer",
    "extract_csp_from_html",
]


class BypassKind(Enum):
    """Kinds of weakness a policy can have."""

    UNSAFE_INLINE = "unsafe_inline"
    UNSAFE_EVAL = "unsafe_eval"
    DATA_URI = "data_uri"
    MISSING_BASE_URI = "missing_base_uri"
    JSONP_ENDPOINT = "jsonp_endpoint"
    ANGULAR_BYPASS = "angular_bypass"
    CDN_BYPASS = "cdn_bypass"
    WILDCARD_SOURCE = "wildcard_source"
    UNSAFE_HASHES = "unsafe_hashes"
    NONCE_WITH_UNSAFE_INLINE = "nonce_with_unsafe_inline"
    UNRESTRICTED_OBJECT_SRC = "unrestricted_object_src"
    UNRESTRICTED_FRAME_SRC = "unrestricted_frame_src"
    MISSING_FORM_ACTION = "missing_form_action"
    REPORT_ONLY = "report_only"
    DEPRECATED_DIRECTIVE = "deprecated_directive"


_SEVERITY = {
    BypassKind.UNSAFE_INLINE: 10,
    BypassKind.UNSAFE_EVAL: 8,
    BypassKind.DATA_URI: 7,
    BypassKind.JSONP_ENDPOINT: 9,
    BypassKind.ANGULAR_BYPASS: 9,
    BypassKind.CDN_BYPASS: 8,
    BypassKind.WILDCARD_SOURCE: 6,
    BypassKind.MISSING_BASE_URI: 5,
    BypassKind.UNSAFE_HASHES: 4,
    BypassKind.NONCE_WITH_UNSAFE_INLINE: 3,
    BypassKind.UNRESTRICTED_OBJECT_SRC: 5,
    BypassKind.UNRESTRICTED_FRAME_SRC: 4,
    BypassKind.MISSING_FORM_ACTION: 4,
    BypassKind.REPORT_ONLY: 10,
    BypassKind.DEPRECATED_DIRECTIVE: 2,
}

_DESCRIPTION = {
    BypassKind.UNSAFE_INLINE: "unsafe-inline allows arbitrary inline scripts",
    BypassKind.UNSAFE_EVAL: "unsafe-eval allows eval() and similar",
    BypassKind.DATA_URI: "data: URIs can be used to inject scripts",
    BypassKind.JSONP_ENDPOINT: "JSONP endpoint {} can bypass CSP",
    BypassKind.ANGULAR_BYPASS: "Angular.js can bypass CSP via template injection",
    BypassKind.CDN_BYPASS: "CDN {} hosts exploitable scripts",
    BypassKind.WILDCARD_SOURCE: "Wildcard {} allows many origins",
    BypassKind.MISSING_BASE_URI: "Missing base-uri allows base tag hijacking",
    BypassKind.UNSAFE_HASHES: "unsafe-hashes allows specific inline handlers",
    BypassKind.NONCE_WITH_UNSAFE_INLINE: "Nonce present with unsafe-inline (nonce takes precedence)",
    BypassKind.UNRESTRICTED_OBJECT_SRC: "object-src not restricted, allows plugin content",
    BypassKind.UNRESTRICTED_FRAME_SRC: "frame-src not restricted, allows arbitrary framing",
    BypassKind.MISSING_FORM_ACTION: "Missing form-action allows form hijacking",
    BypassKind.REPORT_ONLY: "CSP is report-only, not enforced",
    BypassKind.DEPRECATED_DIRECTIVE: "Deprecated directive: {}",
}


@dataclass(frozen=True)
class CspBypass:
    """A weakness found in a policy, with an optional detail such as a URL or source."""

    kind: BypassKind
    detail: str | None = None

    def severity(self) -> int:
        """Severity from 1 to 10."""
        return _SEVERITY[self.kind]

    def description(self) -> str:
        """Human-readable description."""
        return _DESCRIPTION[self.kind].format(self.detail)


@dataclass
class CspAnalysis:
    """Result of analysing one policy."""

    policy: str = ""
    directives: dict[str, list[str]] = field(default_factory=dict)
    bypasses: list[CspBypass] = field(default_factory=list)
    unsafe_directives: list[str] = field(default_factory=list)
    missing_directives: list[str] = field(default_factory=list)
    security_score: int = 0
    blocks_inline: bool = False
    blocks_eval: bool = False


_VULNERABLE_CDNS = (
    "cdnjs.cloudflare.com",
    "cdn.jsdelivr.net",
    "unpkg.com",
    "ajax.googleapis.com",
    "code.jquery.com",
    "stackpath.bootstrapcdn.com",
    "maxcdn.bootstrapcdn.com",
)

_IMPORTANT_DIRECTIVES = (
    "default-src",
    "script-src",
    "style-src",
    "object-src",
    "base-uri",
    "form-action",
    "frame-ancestors",
)

_DEPRECATED_DIRECTIVES = ("plugin-types", "referrer", "block-all-mixed-content")

_SCRIPT_DIRECTIVES = ("script-src", "default-src")

_META_CSP = re.compile(
    r"""<meta[^>]+http-equiv\s*=\s*["']Content-Security-Policy["'][^>]+content\s*=\s*["']([^"']+)["']"""
)


def _script_sources(analysis: CspAnalysis) -> list[str] | None:
    for name in _SCRIPT_DIRECTIVES:
        if name in analysis.directives:
            return analysis.directives[name]
    return None


class CspAnalyzer:
    """Parses policies and reports how they could be bypassed."""

    def __init__(self) -> None:
        self.vulnerable_cdns: tuple[str, ...] = _VULNERABLE_CDNS

    def parse(self, csp: str) -> CspAnalysis:
        """Analyse a policy string as found in a header value."""
        analysis = CspAnalysis(policy=csp)

        for raw in csp.split(";"):
            parts = raw.split()
            if not parts:
                continue
            name = parts[0].lower()
            values = parts[1:]
            analysis.directives[name] = list(values)
            self._check_unsafe(name, values, analysis)

        self._check_missing(analysis)
        self._check_bypasses(analysis)

        analysis.security_score = self._calculate_score(analysis)
        analysis.blocks_inline = self._blocks_inline(analysis)
        analysis.blocks_eval = self._blocks_eval(analysis)
        return analysis

    def parse_from_headers(self, headers: Mapping[str, str]) -> CspAnalysis | None:
        """Analyse the policy in lower-case response headers, if there is one."""
        csp = headers.get("content-security-policy")
        if csp is not None:
            return self.parse(csp)

        csp = headers.get("content-security-policy-report-only")
        if csp is not None:
            analysis = self.parse(csp)
            analysis.bypasses.append(CspBypass(BypassKind.REPORT_ONLY))
            return analysis

        return None

    def parse_from_meta(self, content: str) -> CspAnalysis:
        """Analyse the content of a CSP meta tag."""
        return self.parse(content)

    def _check_unsafe(self, name: str, values: list[str], analysis: CspAnalysis) -> None:
        is_script = name in _SCRIPT_DIRECTIVES
        for value in values:
            lowered = value.lower()

            if lowered == "'unsafe-inline'":
                analysis.unsafe_directives.append(f"{name}: unsafe-inline")
                if is_script:
                    analysis.bypasses.append(CspBypass(BypassKind.UNSAFE_INLINE))

            if lowered == "'unsafe-eval'":
                analysis.unsafe_directives.append(f"{name}: unsafe-eval")
                if is_script:
                    analysis.bypasses.append(CspBypass(BypassKind.UNSAFE_EVAL))

            if lowered == "'unsafe-hashes'":
                analysis.unsafe_directives.append(f"{name}: unsafe-hashes")
                analysis.bypasses.append(CspBypass(BypassKind.UNSAFE_HASHES))

            if lowered == "data:" and is_script:
                analysis.bypasses.append(CspBypass(BypassKind.DATA_URI))

            if "*" in value and value != "'unsafe-inline'":
                analysis.bypasses.append(CspBypass(BypassKind.WILDCARD_SOURCE, value))

            analysis.bypasses.extend(
                CspBypass(BypassKind.CDN_BYPASS, cdn)
                for cdn in self.vulnerable_cdns
                if cdn in value
            )

        has_nonce = any(v.startswith("'nonce-") for v in values)
        has_unsafe_inline = "'unsafe-inline'" in values
        if has_nonce and has_unsafe_inline:
            analysis.bypasses.append(CspBypass(BypassKind.NONCE_WITH_UNSAFE_INLINE))

    def _check_missing(self, analysis: CspAnalysis) -> None:
        directives = analysis.directives
        has_default = "default-src" in directives

        for directive in _IMPORTANT_DIRECTIVES:
            if directive in directives:
                continue
            if directive != "default-src" and has_default:
                continue
            analysis.missing_directives.append(directive)

        if "base-uri" not in directives:
            analysis.bypasses.append(CspBypass(BypassKind.MISSING_BASE_URI))
        if "form-action" not in directives:
            analysis.bypasses.append(CspBypass(BypassKind.MISSING_FORM_ACTION))
        if "object-src" not in directives and not has_default:
            analysis.bypasses.append(CspBypass(BypassKind.UNRESTRICTED_OBJECT_SRC))
        if (
            "frame-src" not in directives
            and "child-src" not in directives
            and not has_default
        ):
            analysis.bypasses.append(CspBypass(BypassKind.UNRESTRICTED_FRAME_SRC))

    def _check_bypasses(self, analysis: CspAnalysis) -> None:
        sources = _script_sources(analysis) or []
        if any("ajax.googleapis.com" in s or "angularjs" in s for s in sources):
            analysis.bypasses.append(CspBypass(BypassKind.ANGULAR_BYPASS))

        analysis.bypasses.extend(
            CspBypass(BypassKind.DEPRECATED_DIRECTIVE, dep)
            for dep in _DEPRECATED_DIRECTIVES
            if dep in analysis.directives
        )

    @staticmethod
    def _calculate_score(analysis: CspAnalysis) -> int:
        score = 100
        score -= sum(b.severity() * 3 for b in analysis.bypasses)
        score -= len(analysis.missing_directives) * 5
        score -= len(analysis.unsafe_directives) * 8

        has_nonce = any(
            s.startswith(("'nonce-", "'sha256-"))
            for values in analysis.directives.values()
            for s in values
        )
        if has_nonce:
            score += 10

        return max(0, min(100, score))

    @staticmethod
    def _blocks_inline(analysis: CspAnalysis) -> bool:
        values = _script_sources(analysis)
        if values is None:
            return False
        if "'unsafe-inline'" in values:
            return any(
                v.startswith(("'nonce-", "'sha256-", "'sha384-", "'sha512-"))
                for v in values
            )
        return True

    @staticmethod
    def _blocks_eval(analysis: CspAnalysis) -> bool:
        values = _script_sources(analysis)
        if values is None:
            return False
        return "'unsafe-eval'" not in values


def extract_csp_from_html(html: str) -> str | None:
    """Return the policy from a Content-Security-Policy meta tag, if present."""
    match = _META_CSP.search(html)
    return match.group(1) if match else None