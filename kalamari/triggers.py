"""XSS trigger records and the result of analysing one page."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum

__all__ = ["XssTriggerType", "XssTrigger", "XssResult"]


class XssTriggerType(Enum):
    """What kind of evidence a trigger represents."""

    ALERT = "Alert"
    CONFIRM = "Confirm"
    PROMPT = "Prompt"
    EVAL = "Eval"
    DOCUMENT_WRITE = "DocumentWrite"
    INNER_HTML = "InnerHtml"
    EVENT_HANDLER = "EventHandler"
    DOM_MANIPULATION = "DomManipulation"
    SCRIPT_INJECTION = "ScriptInjection"
    ERROR_BASED = "ErrorBased"
    CUSTOM_MARKER = "CustomMarker"


_SEVERITY = {
    XssTriggerType.ALERT: 10,
    XssTriggerType.CONFIRM: 10,
    XssTriggerType.PROMPT: 10,
    XssTriggerType.SCRIPT_INJECTION: 10,
    XssTriggerType.EVAL: 9,
    XssTriggerType.DOCUMENT_WRITE: 8,
    XssTriggerType.INNER_HTML: 7,
    XssTriggerType.EVENT_HANDLER: 7,
    XssTriggerType.DOM_MANIPULATION: 6,
    XssTriggerType.ERROR_BASED: 5,
    XssTriggerType.CUSTOM_MARKER: 8,
}

_CONFIRMED = frozenset({
    XssTriggerType.ALERT,
    XssTriggerType.CONFIRM,
    XssTriggerType.PROMPT,
    XssTriggerType.SCRIPT_INJECTION,
})


@dataclass(frozen=True)
class XssTrigger:
    """One piece of XSS evidence."""

    trigger_type: XssTriggerType
    payload: str
    context: str = ""
    url: str | None = None

    def with_context(self, context: str) -> XssTrigger:
        """Return a copy carrying the given context."""
        return dataclasses.replace(self, context=context)

    def with_url(self, url: str) -> XssTrigger:
        """Return a copy carrying the given URL."""
        return dataclasses.replace(self, url=url)

    def severity(self) -> int:
        """Severity score from 0 to 10."""
        return _SEVERITY[self.trigger_type]

    def is_confirmed(self) -> bool:
        """Whether JavaScript actually executed."""
        return self.trigger_type in _CONFIRMED

    def __str__(self) -> str:
        return f"[{self.trigger_type.value}] {self.payload} (severity: {self.severity()})"


@dataclass
class XssResult:
    """Outcome of testing one URL or document."""

    triggers: list[XssTrigger] = field(default_factory=list)
    url: str | None = None
    parameter: str | None = None
    original_value: str | None = None
    payload_used: str | None = None
    has_reflection: bool = False
    response_size: int = 0
    response_time_ms: int = 0

    def is_vulnerable(self) -> bool:
        """Whether any trigger confirms execution."""
        return any(t.is_confirmed() for t in self.triggers)

    def highest_severity(self) -> XssTrigger | None:
        """The most severe trigger; the last one wins a tie."""
        best: XssTrigger | None = None
        for trigger in self.triggers:
            if best is None or trigger.severity() >= best.severity():
                best = trigger
        return best

    def confirmed_triggers(self) -> list[XssTrigger]:
        """Only the triggers that confirm execution."""
        return [t for t in self.triggers if t.is_confirmed()]