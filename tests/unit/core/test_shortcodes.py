"""Unit tests for core/shortcodes.py"""

import itertools

from mdsite.core.shortcodes import (
    ShortcodeParser, parse_attrs, placeholder, replace_placeholder, scan_tags,
)


def _parser() -> ShortcodeParser:
    """Parser with predictable ids: sc0, sc1, ..."""
    counter = itertools.count()
    return ShortcodeParser(id_factory=lambda: f"sc{next(counter)}")


def test_self_closing_shortcode():
    text, records = _parser().parse('{{figure src="image.jpg" alt="An image"}}')
    assert len(records) == 1
    sc = records[0]
    assert sc.name == "figure"
    assert sc.attrs == {"src": "image.jpg", "alt": "An image"}
    assert sc.content == ""
    assert text == placeholder(sc.id)


def test_block_shortcode():
    text, records = _parser().parse('{{quote author="Plato"}}The unexamined life.{{/quote}}')
    assert len(records) == 1
    assert records[0].name == "quote"
    assert records[0].attrs == {"author": "Plato"}
    assert records[0].content == "The unexamined life."
    assert text == "<!--shortcode:sc0-->"


def test_block_content_trimmed():
    _, records = _parser().parse("{{sidenote}}\n  padded note  \n{{/sidenote}}")
    assert records[0].content == "padded note"


def test_multiple_blocks_keep_surrounding_text():
    src = '{{quote author="A"}}First{{/quote}} Middle {{quote author="B"}}Second{{/quote}}'
    text, records = _parser().parse(src)
    assert [r.content for r in records] == ["First", "Second"]
    assert text == "<!--shortcode:sc0--> Middle <!--shortcode:sc1-->"


def test_block_records_precede_self_closing():
    src = (
        'Start\n{{figure src="a.jpg"}}\nMiddle\n'
        '{{quote author="Test"}}Inner content{{/quote}}\nEnd'
    )
    text, records = _parser().parse(src)
    assert [r.name for r in records] == ["quote", "figure"]
    assert records[0].content == "Inner content"
    assert text == "Start\n<!--shortcode:sc1-->\nMiddle\n<!--shortcode:sc0-->\nEnd"


def test_unclosed_tag_is_self_closing():
    text, records = _parser().parse("{{quote}}no closing tag here")
    assert len(records) == 1
    assert records[0].content == ""
    assert text == "<!--shortcode:sc0-->no closing tag here"


def test_nested_same_name_first_close_wins():
    src = "{{note}}outer {{note}}inner{{/note}} tail{{/note}}"
    text, records = _parser().parse(src)
    assert len(records) == 1
    assert records[0].content == "outer {{note}}inner"
    assert text == "<!--shortcode:sc0--> tail{{/note}}"


def test_nested_different_names_left_in_content():
    _, records = _parser().parse('{{parallel}}A {{cite text="x"}} --- B{{/parallel}}')
    assert len(records) == 1
    assert records[0].content == 'A {{cite text="x"}} --- B'


def test_no_shortcodes_text_unchanged():
    text, records = _parser().parse("Plain *markdown* with { braces }.")
    assert records == []
    assert text == "Plain *markdown* with { braces }."


def test_lone_closing_tag_is_not_a_shortcode():
    text, records = _parser().parse("before {{/quote}} after")
    assert records == []
    assert text == "before {{/quote}} after"


def test_space_before_name_is_not_a_shortcode():
    text, records = _parser().parse("{{ figure }}")
    assert records == []
    assert text == "{{ figure }}"


def test_brace_inside_attribute_is_not_a_shortcode():
    src = '{{figure alt="a {b} c"}}'
    text, records = _parser().parse(src)
    assert records == []
    assert text == src


def test_hyphen_and_underscore_names():
    _, records = _parser().parse('{{bible-ref ref="John 1"}} {{my_code}}')
    assert [r.name for r in records] == ["bible-ref", "my_code"]


def test_single_and_double_quoted_attrs():
    _, records = _parser().parse("""{{figure src='a.jpg' alt="Plato's cave" caption='Say "hi"'}}""")
    assert records[0].attrs == {"src": "a.jpg", "alt": "Plato's cave", "caption": 'Say "hi"'}


def test_malformed_attrs_skipped():
    assert parse_attrs(' src="a.jpg" broken bad=unquoted alt=\'x\' odd="mismatch\'') == {
        "src": "a.jpg", "alt": "x",
    }


def test_attrs_with_spaces_around_equals():
    assert parse_attrs(' src = "a.jpg"') == {"src": "a.jpg"}


def test_default_ids_are_unique():
    _, records = ShortcodeParser().parse("{{a}} {{a}} {{a}}")
    assert len({r.id for r in records}) == 3


def test_scan_tags_positions():
    tags = list(scan_tags('x {{a k="v"}} y {{b}}'))
    assert [(t.start, t.end, t.name) for t in tags] == [(2, 13, "a"), (16, 21, "b")]
    assert tags[0].attrs == ' k="v"'


def test_replace_placeholder_replaces_once():
    text = "<!--shortcode:x--> and <!--shortcode:x-->"
    assert replace_placeholder(text, "x", "<b>") == "<b> and <!--shortcode:x-->"
