import pytest

from kalamari.sri import (
    ResourceType,
    SriAlgorithm,
    SriChecker,
    SriViolationType,
)

PAGE = "https://example.com"
JQUERY = "https://cdnjs.cloudflare.com/ajax/libs/jquery/3.6.0/jquery.min.js"


def test_missing_integrity():
    checker = SriChecker()
    html = f'<script src="{JQUERY}"></script>'
    violations = checker.check_html(html, PAGE)
    assert len(violations) == 1
    assert violations[0].violation_type is SriViolationType.MISSING_INTEGRITY
    assert violations[0].resource_url == JQUERY
    assert violations[0].resource_type is ResourceType.SCRIPT
    assert violations[0].expected_hash is None


def test_with_integrity():
    checker = SriChecker()
    html = f'<script src="{JQUERY}" integrity="sha384-xxx" crossorigin="anonymous"></script>'
    assert checker.check_html(html, PAGE) == []


def test_same_origin_ignored():
    checker = SriChecker()
    html = '<script src="/js/app.js"></script>'
    assert checker.check_html(html, PAGE) == []


def test_same_host_absolute_url_ignored():
    checker = SriChecker()
    html = '<script src="https://example.com/js/app.js"></script>'
    assert checker.check_html(html, PAGE) == []


def test_weak_algorithm():
    checker = SriChecker()
    html = f'<script src="{JQUERY}" integrity="sha256-abc" crossorigin="anonymous"></script>'
    violations = checker.check_html(html, PAGE)
    assert [v.violation_type for v in violations] == [SriViolationType.WEAK_ALGORITHM]
    assert violations[0].expected_hash == "sha256-abc"


def test_sha256_accepted_when_minimum_lowered():
    checker = SriChecker(min_algorithm=SriAlgorithm.SHA256)
    html = f'<script src="{JQUERY}" integrity="sha256-abc" crossorigin="anonymous"></script>'
    assert checker.check_html(html, PAGE) == []


def test_missing_crossorigin():
    checker = SriChecker()
    html = f'<script src="{JQUERY}" integrity="sha384-xxx"></script>'
    violations = checker.check_html(html, PAGE)
    assert [v.violation_type for v in violations] == [SriViolationType.MISSING_CROSSORIGIN]
    assert violations[0].expected_hash == "sha384-xxx"


def test_invalid_format_and_missing_crossorigin():
    checker = SriChecker()
    html = f'<script src="{JQUERY}" integrity="nohash"></script>'
    kinds = [v.violation_type for v in checker.check_html(html, PAGE)]
    assert kinds == [SriViolationType.INVALID_FORMAT, SriViolationType.MISSING_CROSSORIGIN]


def test_external_non_cdn_not_required():
    checker = SriChecker()
    html = '<script src="https://other.example.org/lib.js"></script>'
    assert checker.check_html(html, PAGE) == []


def test_protocol_relative_cdn_url():
    checker = SriChecker()
    html = '<script src="//unpkg.com/react/index.js"></script>'
    violations = checker.check_html(html, PAGE)
    assert [v.violation_type for v in violations] == [SriViolationType.MISSING_INTEGRITY]


def test_scripts_not_required():
    checker = SriChecker(require_scripts=False)
    html = f'<script src="{JQUERY}"></script>'
    assert checker.check_html(html, PAGE) == []


def test_stylesheets_skipped_by_default():
    checker = SriChecker()
    html = '<link rel="stylesheet" href="https://cdn.jsdelivr.net/npm/x.css">'
    assert checker.check_html(html, PAGE) == []


def test_stylesheet_missing_integrity_when_required():
    checker = SriChecker(require_stylesheets=True)
    html = '<link rel="stylesheet" href="https://cdn.jsdelivr.net/npm/x.css">'
    violations = checker.check_html(html, PAGE)
    assert len(violations) == 1
    assert violations[0].resource_type is ResourceType.STYLESHEET
    assert violations[0].violation_type is SriViolationType.MISSING_INTEGRITY
    assert violations[0].resource_url == "https://cdn.jsdelivr.net/npm/x.css"


def test_long_element_truncated():
    checker = SriChecker()
    src = "https://unpkg.com/" + "a" * 300 + ".js"
    html = f'<script src="{src}"></script>'
    violations = checker.check_html(html, PAGE)
    assert len(violations[0].element_html) == 203
    assert violations[0].element_html.endswith("...")


@pytest.mark.parametrize(
    ("kind", "expected"),
    [
        (SriViolationType.MISSING_INTEGRITY, 6),
        (SriViolationType.HASH_MISMATCH, 10),
        (SriViolationType.WEAK_ALGORITHM, 3),
        (SriViolationType.INVALID_FORMAT, 5),
        (SriViolationType.MISSING_CROSSORIGIN, 4),
    ],
)
def test_severity(kind, expected):
    assert kind.severity() == expected


def test_algorithm_ordering_drives_weak_check():
    assert SriAlgorithm.SHA256 < SriAlgorithm.SHA384 < SriAlgorithm.SHA512
    checker = SriChecker(min_algorithm=SriAlgorithm.SHA512)
    weak = f'<script src="{JQUERY}" integrity="sha256-abc" crossorigin="anonymous"></script>'
    strong = f'<script src="{JQUERY}" integrity="sha384-abc" crossorigin="anonymous"></script>'
    assert [v.violation_type for v in checker.check_html(weak, PAGE)] == [
        SriViolationType.WEAK_ALGORITHM
    ]
    assert checker.check_html(strong, PAGE) == []