from kalamari.clobbering import DomClobberDetector


def test_id_clobbering():
    result = DomClobberDetector().analyze('<div id="location">test</div>')
    assert result.clobbered_globals
    assert result.clobbered_globals[0].identifier == "location"


def test_id_in_window_and_dangerous_sets_reported_twice():
    result = DomClobberDetector().analyze('<div id="location">test</div>')
    assert len(result.clobbered_globals) == 2
    first = result.clobbered_globals[0]
    assert first.tag == "div"
    assert first.clobbers == "window.location"
    assert first.impact == "Element with id='location' will override window.location"
    assert first.html == '<div id="location">'
    assert result.clobbered_globals[1].impact == (
        "Potentially dangerous id='location' could be used in attack"
    )
    assert result.risk_score == 30


def test_form_clobbering():
    result = DomClobberDetector().analyze('<form><input name="action" value="test"></form>')
    assert result.form_hijacks
    assert result.form_hijacks[0].identifier == "action"
    assert result.form_hijacks[0].clobbers == "form.action"
    assert result.form_hijacks[0].impact == "Input name='action' clobbers form.action"
    assert result.clobbered_globals == []
    assert result.risk_score == 20


def test_form_control_outside_form_ignored():
    result = DomClobberDetector().analyze('<input name="action">')
    assert result.form_hijacks == []
    assert result.risk_score == 0


def test_prototype_pollution():
    result = DomClobberDetector().analyze('<div id="__proto__">test</div>')
    assert result.prototype_pollution == ['id="__proto__"']
    assert result.risk_score == 30


def test_name_clobbering():
    result = DomClobberDetector().analyze('<img name="alert" src="x">')
    assert len(result.clobbered_globals) == 1
    element = result.clobbered_globals[0]
    assert element.tag == "img"
    assert element.clobbers == "window.alert / document.alert"
    assert element.impact == "<img> with name='alert' clobbers global"
    assert result.risk_score == 15


def test_dangerous_id_case_insensitive():
    result = DomClobberDetector().analyze('<span id="Token"></span>')
    assert len(result.clobbered_globals) == 1
    assert result.clobbered_globals[0].identifier == "Token"
    assert result.risk_score == 10


def test_harmless_document_has_no_findings():
    result = DomClobberDetector().analyze('<div id="main"><p class="x">hi</p></div>')
    assert result.clobbered_globals == []
    assert result.form_hijacks == []
    assert result.prototype_pollution == []
    assert result.risk_score == 0


def test_risk_capped_at_100():
    html = "".join(f'<div id="prototype{i}"></div>' for i in range(5))
    result = DomClobberDetector().analyze(html)
    assert len(result.prototype_pollution) == 5
    assert result.risk_score == 100


def test_long_element_truncated():
    html = '<div id="alert" class="' + "c" * 300 + '">x</div>'
    result = DomClobberDetector().analyze(html)
    snippet = result.clobbered_globals[0].html
    assert len(snippet) == 153
    assert snippet.endswith("...")