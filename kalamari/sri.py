"""Subresource Integrity checks for external scripts and stylesheets."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum, IntEnum

__all__ = [
    "SriViolationType",
    "ResourceType",
    "SriAlgorithm",
    "SriViolation",
    "SriChecker",
]


class SriViolationType(Enum):
    """Ways a resource can fail the integrity rules."""

    MISSING_INTEGRITY = "missing_integrity"
    HASH_MISMATCH = "hash_mismatch"
    WEAK_ALGORITHM = "weak_algorithm"
    INVALID_FORMAT = "invalid_format"
    MISSING_CROSSORIGIN = "missing_crossorigin"

    def severity(self) -> int:
        """Severity from 1 to 10."""
        return _SEVERITY[self]


_SEVERITY = {
    SriViolationType.MISSING_INTEGRITY: 6,
    SriViolationType.HASH_MISMATCH: 10,
    SriViolationType.WEAK_ALGORITHM: 3,
    SriViolationType.INVALID_FORMAT: 5,
    SriViolationType.MISSING_CROSSORIGIN: 4,
}


class ResourceType(Enum):
    """Kind of subresource."""

    SCRIPT = "script"
    STYLESHEET = "stylesheet"
    OTHER = "other"


class SriAlgorithm(IntEnum):
    """Integrity hash algorithms, ordered by strength."""

    SHA256 = 256
    SHA384 = 384
    SHA512 = 512


@dataclass
class SriViolation:
    """One integrity problem found on a page."""

    resource_url: str
    resource_type: ResourceType
    expected_hash: str | None
    actual_hash: str | None
    violation_type: SriViolationType
    element_html: str


_SCRIPT_TAG = re.compile(r"""<script[^>]*src\s*=\s*["']([^"']+)["'][^>]*>""")
_STYLESHEET_TAG = re.compile(
    r"""<link[^>]*rel\s*=\s*["']stylesheet["'][^>]*href\s*=\s*["']([^"']+)["'][^>]*>"""
)
_INTEGRITY_ATTR = re.compile(r"""integrity\s*=\s*["']([^"']+)["']""")

_DEFAULT_CDN_HOSTS = (
    "cdnjs.cloudflare.com",
    "cdn.jsdelivr.net",
    "unpkg.com",
    "ajax.googleapis.com",
    "code.jquery.com",
)

_ELEMENT_LIMIT = 200


def _truncate(text: str, limit: int) -> str:
    return text if len(text) <= limit else f"{text[:limit]}..."


def _strip_repeated(text: str, prefix: str) -> str:
    while text.startswith(prefix):
        text = text[len(prefix):]
    return text


def _extract_host(url: str) -> str:
    for prefix in ("https://", "http://", "//"):
        url = _strip_repeated(url, prefix)
    return url.split("/", 1)[0]


@dataclass
class SriChecker:
    """Finds external resources loaded without adequate integrity protection."""

    require_scripts: bool = True
    require_stylesheets: bool = False
    min_algorithm: SriAlgorithm = SriAlgorithm.SHA384
    cdn_hosts: list[str] = field(default_factory=lambda: list(_DEFAULT_CDN_HOSTS))

    def check_html(self, html: str, page_url: str) -> list[SriViolation]:
        """Return every integrity violation in the page, scripts first."""
        return [*self._check_scripts(html, page_url), *self._check_stylesheets(html, page_url)]

    def _check_scripts(self, html: str, page_url: str) -> list[SriViolation]:
        violations: list[SriViolation] = []
        for match in _SCRIPT_TAG.finditer(html):
            src = match.group(1)
            tag = match.group(0)
            if self._is_same_origin(src, page_url):
                continue

            integrity = self._extract_integrity(tag)
            if integrity is not None:
                problem = self._validate_integrity(integrity, src, tag)
                if problem is not None:
                    violations.append(problem)
                if "crossorigin" not in tag:
                    violations.append(
                        SriViolation(
                            resource_url=src,
                            resource_type=ResourceType.SCRIPT,
                            expected_hash=integrity,
                            actual_hash=None,
                            violation_type=SriViolationType.MISSING_CROSSORIGIN,
                            element_html=_truncate(tag, _ELEMENT_LIMIT),
                        )
                    )
            elif self._should_require_sri(src):
                violations.append(
                    SriViolation(
                        resource_url=src,
                        resource_type=ResourceType.SCRIPT,
                        expected_hash=None,
                        actual_hash=None,
                        violation_type=SriViolationType.MISSING_INTEGRITY,
                        element_html=_truncate(tag, _ELEMENT_LIMIT),
                    )
                )
        return violations

    def _check_stylesheets(self, html: str, page_url: str) -> list[SriViolation]:
        if not self.require_stylesheets:
            return []
        violations: list[SriViolation] = []
        for match in _STYLESHEET_TAG.finditer(html):
            href = match.group(1)
            tag = match.group(0)
            if self._is_same_origin(href, page_url):
                continue
            if self._extract_integrity(tag) is None and self._should_require_sri(href):
                violations.append(
                    SriViolation(
                        resource_url=href,
                        resource_type=ResourceType.STYLESHEET,
                        expected_hash=None,
                        actual_hash=None,
                        violation_type=SriViolationType.MISSING_INTEGRITY,
                        element_html=_truncate(tag, _ELEMENT_LIMIT),
                    )
                )
        return violations

    @staticmethod
    def _extract_integrity(tag: str) -> str | None:
        match = _INTEGRITY_ATTR.search(tag)
        return match.group(1) if match else None

    def _validate_integrity(self, integrity: str, url: str, tag: str) -> SriViolation | None:
        parts = integrity.split("-")
        if len(parts) < 2:
            kind = SriViolationType.INVALID_FORMAT
        elif parts[0].lower() == "sha256" and self.min_algorithm > SriAlgorithm.SHA256:
            kind = SriViolationType.WEAK_ALGORITHM
        else:
            return None
        return SriViolation(
            resource_url=url,
            resource_type=ResourceType.SCRIPT,
            expected_hash=integrity,
            actual_hash=None,
            violation_type=kind,
            element_html=_truncate(tag, _ELEMENT_LIMIT),
        )

    @staticmethod
    def _is_same_origin(url: str, page_url: str) -> bool:
        if not url.startswith(("http://", "https://", "//")):
            return True
        return _extract_host(url) == _extract_host(page_url)

    def _should_require_sri(self, url: str) -> bool:
        if not self.require_scripts:
            return False
        host = _extract_host(url)
        return any(cdn in host for cdn in self.cdn_hosts)