"""Unit tests for the AI response sanitizer passes."""

import pytest

from resume_builder.sanitizer import (
    PIPELINE,
    collapse_markers,
    dedupe_headers,
    dedupe_lines,
    drop_keyword_lines,
    drop_keyword_tags,
    sanitize,
    strip_code_fences,
    strip_document_tags,
)


@pytest.mark.unit
def test_pipeline_order():
    """Passes run fences first and line dedup last."""
    assert PIPELINE == (
        strip_code_fences,
        strip_document_tags,
        collapse_markers,
        drop_keyword_tags,
        drop_keyword_lines,
        dedupe_headers,
        dedupe_lines,
    )


@pytest.mark.unit
def test_strip_code_fences():
    """Both plain and html-tagged fences go away, content stays."""
    assert strip_code_fences("```html\n<p>x</p>\n```") == "\n<p>x</p>\n"
    assert strip_code_fences("```HTML<p>y</p>```") == "<p>y</p>"


@pytest.mark.unit
def test_strip_document_tags_keeps_contents():
    """html/head/body wrappers are removed; <header> is not mistaken for <head>."""
    raw = '<html lang="en"><head></head><body><header>Top</header><p>x</p></body></html>'
    assert strip_document_tags(raw) == "<header>Top</header><p>x</p>"


@pytest.mark.unit
def test_collapse_markers_replaces_bullets():
    """Bullet symbols become a single space."""
    assert collapse_markers("<li>• Python</li>") == "<li> Python</li>"
    assert collapse_markers("Led team\n- Built API") == "Led team\n Built API"


@pytest.mark.unit
def test_collapse_markers_keeps_hyphenated_words():
    """Dashes inside words and date ranges are not list markers."""
    text = "full-stack engineer, 2019-2021, <!-- note -->"
    assert collapse_markers(text) == text


@pytest.mark.unit
def test_drop_keyword_tags_blanks_markup_only():
    """A tag mentioning keywords is blanked; the text after it survives."""
    assert drop_keyword_tags('<div class="keywords">a</div>') == "a</div>"
    assert drop_keyword_tags("<p>b</p>") == "<p>b</p>"


@pytest.mark.unit
def test_drop_keyword_lines():
    """'Keywords:' runs to the end of its line; closing tags are kept."""
    raw = "<p>Intro</p>\nKeywords: x, y, z\n<p>keywords: a, b</p>"
    assert drop_keyword_lines(raw) == "<p>Intro</p>\n\n<p></p>"


@pytest.mark.unit
def test_dedupe_headers_keeps_first():
    """Repeated h3 titles are dropped regardless of case and spacing."""
    raw = "<h3>Experience</h3><p>a</p><h3>experience </h3><p>b</p>"
    assert dedupe_headers(raw) == "<h3>Experience</h3><p>a</p><p>b</p>"


@pytest.mark.unit
def test_dedupe_lines_drops_blank_and_repeated():
    """Lines split on <br> and newlines; repeats compare trimmed and lowercased."""
    assert dedupe_lines("Python<br>python\n\nSQL<br/>  SQL  ") == "Python\nSQL"


@pytest.mark.unit
def test_dedupe_lines_keeps_markup_only_lines():
    """Repeated <ul>/</ul> lines are structure, not duplicates."""
    raw = "<ul>\n<li>a</li>\n</ul>\n<ul>\n<li>b</li>\n</ul>"
    assert dedupe_lines(raw) == raw


@pytest.mark.unit
def test_sanitize_full_response():
    """A messy AI answer comes out without fences, wrappers, bullets or repeats."""
    raw = (
        "```html\n<html><body>\n"
        "<h3>Experience</h3>\n<ul>\n<li>• Built APIs</li>\n</ul>\n"
        "<h3>Experience</h3>\n<ul>\n<li>• Built APIs</li>\n</ul>\n"
        "Keywords: python, apis\n"
        "</body></html>\n```"
    )
    cleaned = sanitize(raw)

    assert cleaned.count("<h3>Experience</h3>") == 1
    assert cleaned.count("Built APIs") == 1
    assert "```" not in cleaned
    assert "<body>" not in cleaned
    assert "•" not in cleaned
    assert "Keywords" not in cleaned


@pytest.mark.unit
def test_sanitize_none_is_empty():
    """None is treated as an empty answer."""
    assert sanitize(None) == ""


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw",
    [
        "<h2>Jane Doe</h2>\n<h3>Summary</h3>\n<p>Engineer - builder of things.</p>\n<ul><li>Python</li><li>SQL</li></ul>",
        "<p>Line one<br>Line two<br>line ONE</p>",
        "* Python\n* python\n- SQL",
        "<section>\n<h3>Education</h3>\n<p>BSc, 2015-2019</p>\n</section>",
    ],
)
def test_sanitize_is_idempotent(raw):
    """A second pass over sanitized content changes nothing."""
    once = sanitize(raw)
    assert sanitize(once) == once


@pytest.mark.unit
def test_drop_keyword_lines_with_carriage_returns():
    """A bare \\r ends the Keywords line just like \\n does."""
    raw = "<p>a</p>\rKeywords: x, y, z\r<p>b</p>"
    assert drop_keyword_lines(raw) == "<p>a</p>\r\r<p>b</p>"
    assert drop_keyword_lines("<p>Keywords: x</p>\r<p>b</p>") == "<p></p>\r<p>b</p>"


@pytest.mark.unit
def test_sanitize_drops_keywords_between_carriage_returns():
    """Old Mac line endings do not let a Keywords line through."""
    raw = "<h3>Summary</h3>\r<p>Engineer</p>\rKeywords: x, y, z\r<h3>Skills</h3>"
    assert sanitize(raw) == "<h3>Summary</h3>\n<p>Engineer</p>\n<h3>Skills</h3>"
