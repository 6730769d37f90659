import pytest

from kalamari.sinks import SinkAnalyzer, SinkType, SourceType


@pytest.fixture
def analyzer():
    return SinkAnalyzer()


INNER_CODE = """
            var userInput = location.hash.slice(1);
            document.getElementById('output').innerHTML = userInput;
        """


def test_sink_detection(analyzer):
    sinks = analyzer.analyze(INNER_CODE)
    assert sinks
    assert any(s.sink_type == SinkType.INNER_HTML for s in sinks)


def test_sink_location_and_source(analyzer):
    sink = next(s for s in analyzer.analyze(INNER_CODE) if s.sink_type == SinkType.INNER_HTML)
    assert sink.line == 3
    assert sink.snippet == "document.getElementById('output').innerHTML = userInput;"
    assert sink.source == "LocationHash"


def test_eval_detection(analyzer):
    sinks = analyzer.analyze("eval(userInput)")
    assert sinks
    assert sinks[0].sink_type == SinkType.EVAL
    assert sinks[0].risk_level == 10
    assert sinks[0].line == 1
    assert sinks[0].column == 0
    assert sinks[0].source is None


def test_source_detection(analyzer):
    code = """
            var data = location.search;
            element.innerHTML = data;
        """
    sinks = analyzer.analyze(code)
    assert sinks
    assert any(s.source is not None for s in sinks)
    assert sinks[0].source == "LocationSearch"


def test_column_on_later_line(analyzer):
    sinks = analyzer.analyze("x = 1;\n  eval(a)")
    assert [(s.line, s.column) for s in sinks] == [(2, 2)]


def test_sorted_by_risk(analyzer):
    code = "window.open(u);\nel.innerHTML = v;\neval(w);"
    sinks = analyzer.analyze(code)
    risks = [s.risk_level for s in sinks]
    assert risks == sorted(risks, reverse=True)
    assert {s.sink_type for s in sinks} == {
        SinkType.WINDOW_OPEN, SinkType.INNER_HTML, SinkType.EVAL,
    }


def test_high_risk_and_threshold(analyzer):
    code = "window.open(u);\neval(w);"
    assert analyzer.has_high_risk_sinks(code)
    assert not analyzer.has_high_risk_sinks("window.open(u);")
    above = analyzer.sinks_above_risk(code, 8)
    assert [s.sink_type for s in above] == [SinkType.EVAL]
    assert len(analyzer.sinks_above_risk(code, 1)) == 2


def test_no_sinks_in_plain_code(analyzer):
    assert analyzer.analyze("var a = 1 + 2;") == []


@pytest.mark.parametrize(
    ("kind", "risk", "description"),
    [
        (SinkType.EVAL, 10, "Direct JavaScript code execution via eval()"),
        (SinkType.FUNCTION_CONSTRUCTOR, 10, "JavaScript code execution via Function constructor"),
        (SinkType.DOCUMENT_WRITE, 9, "HTML injection via document.write()"),
        (SinkType.INNER_HTML, 8, "HTML injection via innerHTML assignment"),
        (SinkType.LOCATION_HREF, 7, "URL manipulation via location.href"),
        (SinkType.WINDOW_OPEN, 6, "New window/tab opening via window.open()"),
        (SinkType.JQUERY_APPEND, 7, "HTML injection via jQuery .append()"),
        (SinkType.ANGULAR_BYPASS_SECURITY, 9, "Security bypass in Angular"),
        (SinkType.VUE_HTML, 8, "HTML injection via Vue v-html directive"),
    ],
)
def test_risk_levels_and_descriptions(kind, risk, description):
    assert kind.risk_level() == risk
    assert kind.description() == description


def test_source_pattern_values():
    assert SourceType.LOCATION_HASH.pattern() == r"location\.hash"
    assert SourceType.POST_MESSAGE.pattern() == SourceType.WEB_SOCKET_MESSAGE.pattern()


def test_jquery_sink(analyzer):
    sinks = analyzer.analyze("$('#out').html(value)")
    assert [s.sink_type for s in sinks] == [SinkType.JQUERY_HTML]