"""Stored (persistent) XSS test descriptions, outcomes and payloads."""

from __future__ import annotations

import dataclasses
import time
from dataclasses import dataclass
from dataclasses import field as dc_field

from kalamari.triggers import XssTrigger

__all__ = [
    "StoredXssTest",
    "StoredXssResult",
    "Vulnerable",
    "PayloadStored",
    "NotVulnerable",
    "TestFailed",
    "StoredXssTester",
    "FormFillResult",
    "stored_xss_payloads",
]

MARKER_PLACEHOLDER = "MARKER"


def _unique_suffix() -> str:
    return format(time.time_ns(), "x")


def _new_marker() -> str:
    return f"KALAMARI_{_unique_suffix()}"


@dataclass
class StoredXssTest:
    """Where to inject a payload and where to look for it afterwards.

    The builder methods return a modified copy and leave the original alone.
    """

    inject_url: str
    payload: str
    reflect_urls: list[str] = dc_field(default_factory=list)
    form_field: str = ""
    form_selector: str | None = None
    extra_fields: list[tuple[str, str]] = dc_field(default_factory=list)
    marker: str = dc_field(default_factory=_new_marker)

    def field(self, field: str) -> StoredXssTest:
        """Set the form field the payload goes into."""
        return dataclasses.replace(self, form_field=field)

    def reflect_at(self, url: str) -> StoredXssTest:
        """Add a URL where the payload may show up."""
        return dataclasses.replace(self, reflect_urls=[*self.reflect_urls, url])

    def reflect_at_all(self, urls: list[str]) -> StoredXssTest:
        """Add several URLs where the payload may show up."""
        return dataclasses.replace(self, reflect_urls=[*self.reflect_urls, *urls])

    def form(self, selector: str) -> StoredXssTest:
        """Select the form to submit."""
        return dataclasses.replace(self, form_selector=selector)

    def with_field(self, name: str, value: str) -> StoredXssTest:
        """Add another form field to send along with the payload."""
        return dataclasses.replace(
            self, extra_fields=[*self.extra_fields, (name, value)]
        )

    def marked_payload(self) -> str:
        """The payload with every MARKER placeholder replaced by this test's marker."""
        return self.payload.replace(MARKER_PLACEHOLDER, self.marker)


class StoredXssResult:
    """Outcome of a stored XSS test."""

    def is_vulnerable(self) -> bool:
        """Whether execution of the payload was confirmed."""
        return isinstance(self, Vulnerable)

    def is_potential(self) -> bool:
        """Whether the payload was stored but not seen executing."""
        return isinstance(self, PayloadStored)


@dataclass
class Vulnerable(StoredXssResult):
    """The stored payload executed."""

    inject_point: str
    reflect_point: str
    triggers: list[XssTrigger]
    payload: str


@dataclass
class PayloadStored(StoredXssResult):
    """The payload was found in a page but did not execute."""

    reflect_point: str
    payload_in_page: str


@dataclass
class NotVulnerable(StoredXssResult):
    """No reflection point showed the payload."""

    checked_urls: list[str]


@dataclass
class TestFailed(StoredXssResult):
    """The test could not be carried out."""

    __test__ = False

    reason: str


@dataclass
class StoredXssTester:
    """Settings for running stored XSS tests.

    The builder methods return a modified copy and leave the original alone.
    """

    max_reflect_checks: int = 10
    wait_after_inject_ms: int = 500
    check_source: bool = True

    def max_checks(self, max: int) -> StoredXssTester:
        """Limit how many reflection URLs are checked."""
        return dataclasses.replace(self, max_reflect_checks=max)

    def wait_ms(self, ms: int) -> StoredXssTester:
        """Set the pause between injection and checking, in milliseconds."""
        return dataclasses.replace(self, wait_after_inject_ms=ms)

    def with_check_source(self, check: bool) -> StoredXssTester:
        """Turn searching the page source for the payload on or off."""
        return dataclasses.replace(self, check_source=check)


@dataclass
class FormFillResult:
    """What happened when a form was filled in and submitted."""

    form_found: bool
    submitted: bool
    status: int | None = None
    redirect_url: str | None = None


def stored_xss_payloads(marker: str) -> list[str]:
    """Common payloads for stored XSS, each carrying the marker."""
    return [
        f"<script>alert('{marker}')</script>",
        f"<img src=x onerror=alert('{marker}')>",
        f"<svg onload=alert('{marker}')>",
        f"javascript:alert('{marker}')",
        f"<body onload=alert('{marker}')>",
        f"'\"><script>alert('{marker}')</script>",
        f"<iframe src=\"javascript:alert('{marker}')\">",
        f"<input onfocus=alert('{marker}') autofocus>",
        f"<marquee onstart=alert('{marker}')>",
        f"<details open ontoggle=alert('{marker}')>",
    ]