from a11y_overlay.core import document, placeholder
from a11y_overlay.core.editor import Editor, OutputFilter, restore_placeholder

from tests.conftest import PLACEHOLDER_PAYLOAD, make_placeholder_markup


def test_get_data_round_trips_plain_markup():
    editor = Editor("<p>a <b>b</b></p><ul><li>c</li></ul>")
    assert editor.get_data() == "<p>a <b>b</b></p><ul><li>c</li></ul>"


def test_get_data_without_editable():
    assert Editor().get_data() == ""


def test_placeholders_are_restored_on_export():
    editor = Editor(make_placeholder_markup())
    assert editor.get_data() == "<p>Before</p>" + PLACEHOLDER_PAYLOAD + "<p>After</p>"
    # Live tree still holds the placeholder
    assert placeholder.is_placeholder(editor.editable()[1])


def test_invalid_placeholder_payload_is_kept():
    editor = Editor(make_placeholder_markup("<b>one</b><i>two</i>"))
    assert "data-cke-realelement" in editor.get_data()


def test_restore_placeholder_ignores_plain_elements():
    root = document.parse_editable("<p>a</p>")
    assert restore_placeholder(root[0]) is root[0]


def test_rule_can_drop_element_keeping_tail():
    editor = Editor("<p>a<span>drop</span> tail</p><span>x</span>end")
    editor.output_filter.add_rule(lambda el: None if el.tag == "span" else el)
    assert editor.get_data() == "<p>a tail</p>end"


def test_rule_can_replace_element():
    editor = Editor("<p>a <b>bold</b>!</p>")

    def strong(element):
        if element.tag != "b":
            return element
        replacement = element.makeelement("strong", {})
        replacement.text = element.text
        return replacement

    editor.output_filter.add_rule(strong)
    assert editor.get_data() == "<p>a <strong>bold</strong>!</p>"


def test_rules_run_once_per_element_in_order():
    seen = []
    output_filter = OutputFilter()

    def first(element):
        seen.append(("first", element.tag))
        return element

    def second(element):
        seen.append(("second", element.tag))
        return element

    output_filter.add_rule(first)
    output_filter.add_rule(second)
    output_filter.apply(document.parse_editable("<p><b>x</b></p><!-- c -->"))

    assert seen == [("first", "p"), ("second", "p"), ("first", "b"), ("second", "b")]

    assert output_filter.remove_rule(first)
    assert not output_filter.remove_rule(first)
    assert output_filter.rules == [second]


def test_export_does_not_touch_live_tree():
    editor = Editor("<p>a</p>")
    editor.output_filter.add_rule(lambda el: None)
    assert editor.get_data() == ""
    assert len(editor.editable()) == 1


def test_events():
    editor = Editor("<p>a</p>")
    received = []
    editor.on("content_dom", received.append)
    editor.set_data("<p>b</p>")
    assert received == [None]

    editor.remove_listener("content_dom", received.append)
    editor.set_data("<p>c</p>")
    assert received == [None]
