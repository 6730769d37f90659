# kalamari

Static helpers for web security testing, using only the Python standard library.
Everything works on strings you pass in: HTML, JavaScript, policy text.

- `kalamari.csp`: parse a Content-Security-Policy, list unsafe and missing
  directives, find known bypasses, score the policy from 0 to 100, and say
  whether it blocks inline scripts and `eval`.
- `kalamari.sri`: find external scripts (and, if enabled, stylesheets) whose
  `integrity` attribute is missing, uses a weak algorithm or is malformed, or
  that lack `crossorigin`.
- `kalamari.clobbering`: find `id`/`name` attributes that override window or
  form properties, and `__proto__`/`constructor`/`prototype` identifiers.
- `kalamari.sinks`: find dangerous DOM sinks in JavaScript (`eval`,
  `innerHTML`, `document.write`, jQuery `.html()`, ...) with line, column,
  snippet and any source such as `location.hash` found near them.
- `kalamari.payloads`: generate XSS payloads carrying a marker, grouped by
  injection context, and encode them.
- `kalamari.stored`: describe stored-XSS tests and their possible outcomes,
  and list common stored-XSS payloads.
- `kalamari.triggers`: `XssTrigger` and `XssResult` records with severities.

## Install

```
pip install .
```

## Examples

### CSP

```python
from kalamari.csp import CspAnalyzer, BypassKind, extract_csp_from_html

analyzer = CspAnalyzer()
analysis = analyzer.parse("script-src 'self' 'unsafe-inline'")
print(analysis.security_score, analysis.blocks_inline, analysis.missing_directives)
for bypass in analysis.bypasses:
    print(bypass.kind, bypass.severity(), bypass.description())

html = '<meta http-equiv="Content-Security-Policy" content="default-src \'self\'">'
print(extract_csp_from_html(html))  # default-src 'self'

# Header names must be lower case; a report-only policy adds a REPORT_ONLY bypass.
analysis = analyzer.parse_from_headers({"content-security-policy-report-only": "default-src 'self'"})
print(any(b.kind is BypassKind.REPORT_ONLY for b in analysis.bypasses))
```

### Subresource Integrity

```python
from kalamari.sri import SriChecker

html = '<script src="https://cdnjs.cloudflare.com/ajax/libs/jquery/3.6.0/jquery.min.js"></script>'
for violation in SriChecker().check_html(html, "https://example.com"):
    print(violation.violation_type, violation.resource_url)
```

`SriChecker` is a dataclass: `require_scripts`, `require_stylesheets`
(off by default), `min_algorithm` (`SriAlgorithm.SHA384` by default) and
`cdn_hosts`. Relative URLs and URLs on the page's own host are skipped. A
missing `integrity` is reported only for resources on one of `cdn_hosts`.

### DOM clobbering

```python
from kalamari.clobbering import DomClobberDetector

result = DomClobberDetector().analyze('<form><input name="action"></form>')
print(result.form_hijacks[0].clobbers, result.risk_score)  # form.action 20
```

### DOM sinks

```python
from kalamari.sinks import SinkAnalyzer

analyzer = SinkAnalyzer()
for sink in analyzer.analyze("el.innerHTML = location.hash"):
    print(sink.sink_type, sink.line, sink.column, sink.source, sink.risk_level)
print(analyzer.has_high_risk_sinks("eval(x)"))
print(analyzer.sinks_above_risk("window.open(u); eval(x)", 9))
```

Results are sorted by risk, highest first.

### Payloads

```python
from kalamari.payloads import PayloadGenerator, PayloadContext, PayloadEncoding

gen = PayloadGenerator()          # marker "KALAMARI_XSS"; PayloadGenerator("MINE") for another
for p in gen.payloads_for_context(PayloadContext.HTML_CONTENT):
    print(p.category, p.payload)  # HTML payloads plus the universal polyglots
print(gen.encode_payload("<script>", PayloadEncoding.URL))  # %3Cscript%3E
```

Encodings: `NONE`, `URL`, `HTML_ENTITY`, `UNICODE`, `HEX`, `BASE64`, `MIXED`.
`URL`, `HEX` and the URL part of `MIXED` keep only the low byte of each character.

### Stored XSS tests

```python
from kalamari.stored import StoredXssTest, StoredXssTester, stored_xss_payloads

test = (
    StoredXssTest("https://example.com/post", "<script>alert('MARKER')</script>")
    .field("comment")
    .reflect_at("https://example.com/posts")
    .with_field("title", "Test Post")
)
print(test.marked_payload())  # MARKER replaced by the test's unique marker
print(stored_xss_payloads("TEST123")[0])

tester = StoredXssTester().max_checks(5).wait_ms(250).with_check_source(False)
```

Builder methods return a modified copy. Outcomes are the `StoredXssResult`
subclasses `Vulnerable`, `PayloadStored`, `NotVulnerable` and `TestFailed`,
with `is_vulnerable()` and `is_potential()`.

### Triggers

```python
from kalamari.triggers import XssTrigger, XssTriggerType, XssResult

trigger = XssTrigger(XssTriggerType.ALERT, "alert(1)").with_url("https://example.com/")
result = XssResult(triggers=[trigger])
print(result.is_vulnerable(), result.highest_severity(), str(trigger))
```

## What this package does not do

It does not fetch pages, parse a DOM, or run JavaScript. Nothing here sends
requests, submits forms or executes payloads: `StoredXssTest` and
`StoredXssTester` only describe a test, and the result classes only hold its
outcome. The SRI checker never downloads or hashes resources, so it does not
report `HASH_MISMATCH`. There is no command-line tool.

## Tests

```
pip install .[test]
pytest
```