"""Detection of DOM clobbering vectors in HTML."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

__all__ = ["ClobberedElement", "DomClobberResult", "DomClobberDetector"]


@dataclass
class ClobberedElement:
    """An element whose id or name shadows a property."""

    tag: str
    identifier: str
    clobbers: str
    impact: str
    html: str


@dataclass
class DomClobberResult:
    """Everything found in one document."""

    clobbered_globals: list[ClobberedElement] = field(default_factory=list)
    form_hijacks: list[ClobberedElement] = field(default_factory=list)
    prototype_pollution: list[str] = field(default_factory=list)
    risk_score: int = 0


_WINDOW_PROPERTIES = frozenset({
    "location", "document", "alert", "confirm", "prompt",
    "open", "close", "print", "fetch", "XMLHttpRequest",
    "eval", "Function", "setTimeout", "setInterval",
    "localStorage", "sessionStorage", "indexedDB",
    "navigator", "history", "screen", "frames",
    "parent", "top", "self", "opener", "name",
})

_DOCUMENT_PROPERTIES = frozenset({
    "body", "head", "forms", "links", "images", "scripts",
    "cookie", "domain", "referrer", "URL", "location",
    "createElement", "getElementById", "querySelector",
    "write", "writeln", "open", "close",
})

_DANGEROUS_NAMES = frozenset({
    "location", "url", "href", "src", "action", "data",
    "innerHTML", "outerHTML", "textContent",
    "callback", "redirect", "return", "next", "goto",
    "config", "settings", "options", "params",
    "token", "auth", "session", "user", "admin",
})

_FORM_PROPERTIES = frozenset({
    "action", "method", "target", "submit", "reset",
    "elements", "length", "encoding", "enctype",
})

_ID_ATTR = re.compile(r"""<(\w+)[^>]*\bid\s*=\s*["']([^"']+)["'][^>]*>""")
_NAMED_ELEMENT = re.compile(
    r"""<(form|iframe|embed|object|img)[^>]*\bname\s*=\s*["']([^"']+)["'][^>]*>"""
)
_FORM = re.compile(r"""<form[^>]*>([\s\S]*?)</form>""")
_FORM_CONTROL = re.compile(
    r"""<(input|button|select|textarea)[^>]*\bname\s*=\s*["']([^"']+)["'][^>]*>"""
)
_PROTOTYPE = re.compile(r"""(?:id|name)\s*=\s*["'](__proto__|constructor|prototype)[^"']*["']""")

_HTML_LIMIT = 150


def _truncate(text: str, limit: int) -> str:
    return text if len(text) <= limit else f"{text[:limit]}..."


class DomClobberDetector:
    """Finds elements whose id or name attributes override globals or form properties."""

    def __init__(self) -> None:
        self.window_properties: frozenset[str] = _WINDOW_PROPERTIES
        self.document_properties: frozenset[str] = _DOCUMENT_PROPERTIES
        self.dangerous_names: frozenset[str] = _DANGEROUS_NAMES

    def analyze(self, html: str) -> DomClobberResult:
        """Analyse an HTML document for clobbering vectors and score the risk."""
        result = DomClobberResult()
        self._find_id_clobbering(html, result)
        self._find_name_clobbering(html, result)
        self._find_form_clobbering(html, result)
        result.prototype_pollution.extend(m.group(0) for m in _PROTOTYPE.finditer(html))
        result.risk_score = self._calculate_risk(result)
        return result

    def _find_id_clobbering(self, html: str, result: DomClobberResult) -> None:
        for match in _ID_ATTR.finditer(html):
            tag, ident = match.group(1), match.group(2)
            snippet = _truncate(match.group(0), _HTML_LIMIT)

            if ident in self.window_properties:
                result.clobbered_globals.append(
                    ClobberedElement(
                        tag=tag,
                        identifier=ident,
                        clobbers=f"window.{ident}",
                        impact=f"Element with id='{ident}' will override window.{ident}",
                        html=snippet,
                    )
                )
            if ident.lower() in self.dangerous_names:
                result.clobbered_globals.append(
                    ClobberedElement(
                        tag=tag,
                        identifier=ident,
                        clobbers=f"window.{ident}",
                        impact=f"Potentially dangerous id='{ident}' could be used in attack",
                        html=snippet,
                    )
                )

    def _find_name_clobbering(self, html: str, result: DomClobberResult) -> None:
        for match in _NAMED_ELEMENT.finditer(html):
            tag, name = match.group(1), match.group(2)
            if name in self.window_properties or name.lower() in self.dangerous_names:
                result.clobbered_globals.append(
                    ClobberedElement(
                        tag=tag,
                        identifier=name,
                        clobbers=f"window.{name} / document.{name}",
                        impact=f"<{tag}> with name='{name}' clobbers global",
                        html=_truncate(match.group(0), _HTML_LIMIT),
                    )
                )

    @staticmethod
    def _find_form_clobbering(html: str, result: DomClobberResult) -> None:
        for form in _FORM.finditer(html):
            for control in _FORM_CONTROL.finditer(form.group(1)):
                tag, name = control.group(1), control.group(2)
                if name in _FORM_PROPERTIES:
                    result.form_hijacks.append(
                        ClobberedElement(
                            tag=tag,
                            identifier=name,
                            clobbers=f"form.{name}",
                            impact=f"Input name='{name}' clobbers form.{name}",
                            html=_truncate(control.group(0), _HTML_LIMIT),
                        )
                    )

    def _calculate_risk(self, result: DomClobberResult) -> int:
        score = 0
        for element in result.clobbered_globals:
            if element.identifier in self.window_properties:
                score += 15
            elif element.identifier.lower() in self.dangerous_names:
                score += 10
        score += len(result.form_hijacks) * 20
        score += len(result.prototype_pollution) * 30
        return min(score, 100)