import pytest

from a11y_overlay.core import document, markers
from a11y_overlay.core.exceptions import QuickFixError
from a11y_overlay.core.models import Issue
from a11y_overlay.core.quickfix.base import QuickFixForm
from a11y_overlay.quickfix.element_replace import ElementReplace
from a11y_overlay.quickfix.img_alt import ImgAlt
from a11y_overlay.quickfix.paragraph_to_header import ParagraphToHeader


class Recorder:
    def __init__(self):
        self.calls = []

    def __call__(self, value):
        self.calls.append(value)


def issue_for(markup, path, issue_id="issue"):
    root = document.parse_editable(markup)
    element = root
    for index in path:
        element = element[index]
    return root, Issue(issue_id, element=element)


class TestQuickFixForm:

    def test_default_values(self):
        form = QuickFixForm()
        form.set_inputs({"alt": {"type": "text", "label": "Alt", "value": "x"}})
        assert form.default_values() == {"alt": "x"}
        form.get_inputs()["alt"]["value"] = "changed"
        assert form.default_values() == {"alt": "x"}


class TestImgAlt:

    def test_display(self):
        _, issue = issue_for('<img src="a.png" alt="Logo">', [0], "imgHasAlt")
        form = QuickFixForm()
        ImgAlt(issue).display(form)

        alt_input = form.get_inputs()["alt"]
        assert alt_input["type"] == "text"
        assert alt_input["label"] == "Alternative text"
        assert alt_input["value"] == "Logo"

    def test_display_without_alt(self):
        _, issue = issue_for('<img src="a.png">', [0])
        form = QuickFixForm()
        ImgAlt(issue).display(form)
        assert form.default_values() == {"alt": ""}

    def test_fix(self):
        _, issue = issue_for('<img src="a.png">', [0])
        fix = ImgAlt(issue)
        callback = Recorder()
        fix.fix({"alt": "new alt"}, callback)

        assert issue.element.get("alt") == "new alt"
        assert callback.calls == [fix]

    def test_validate_positive(self):
        _, issue = issue_for('<img src="a.png">', [0])
        assert ImgAlt(issue).validate({"alt": "foo"}) == []

    def test_validate_empty(self):
        _, issue = issue_for('<img src="a.png">', [0])
        assert ImgAlt(issue).validate({"alt": ""}) == ["Alternative text can not be empty"]
        assert ImgAlt(issue).validate({}) == ["Alternative text can not be empty"]

    def test_validate_too_long(self):
        _, issue = issue_for('<img src="a.png">', [0])
        expected = ("Alternative text is too long. It should be up"
                    " to 100 characters while your has 120.")
        assert ImgAlt(issue).validate({"alt": "o" * 120}) == [expected]

    def test_validate_limit_disabled(self, monkeypatch):
        _, issue = issue_for('<img src="a.png">', [0])
        monkeypatch.setattr(ImgAlt, "alt_length_limit", 0)
        assert ImgAlt(issue).validate({"alt": "o" * 500}) == []

    def test_lang_is_per_instance(self):
        _, issue = issue_for('<img src="a.png">', [0])
        fix = ImgAlt(issue)
        fix.lang["alt_label"] = "Texte alternatif"
        assert ImgAlt.lang["alt_label"] == "Alternative text"

    def test_repr(self):
        _, issue = issue_for('<img src="a.png">', [0], "imgHasAlt")
        assert repr(ImgAlt(issue)) == "<ImgAlt issue='imgHasAlt'>"


class TestElementReplace:

    class ToSection(ElementReplace):
        def get_target_name(self, form_attributes):
            return "section"

    def test_replaces_in_place(self):
        root, issue = issue_for(
            '<p>before</p><div class="box %s" data-quail-id="3">lead <b>bold</b> tail</div> after<p>end</p>'
            % markers.ERROR_CLASS,
            [1],
        )
        old = issue.element
        fix = self.ToSection(issue)
        callback = Recorder()
        fix.fix({}, callback)

        new = root[1]
        assert new.tag == "section"
        assert issue.element is new
        assert old.getparent() is None
        assert new.get("class") == "box"
        assert new.get("data-quail-id") == "3"
        assert document.inner_html(new) == "lead <b>bold</b> tail"
        assert new.tail == " after"
        assert [el.tag for el in root] == ["p", "section", "p"]
        assert callback.calls == [fix]

    def test_element_without_parent(self):
        issue = Issue("x", element=document.parse_editable("<p>a</p>"))
        with pytest.raises(QuickFixError):
            self.ToSection(issue).fix({})

    def test_target_name_required(self):
        _, issue = issue_for("<p>a</p>", [0])

        class NoTarget(ElementReplace):
            pass

        with pytest.raises(TypeError):
            NoTarget(issue)
        with pytest.raises(TypeError):
            ElementReplace(issue)


class TestParagraphToHeader:

    def test_display_uses_preferred_level(self):
        _, issue = issue_for("<h1>Title</h1><p>Looks like a heading</p>", [1], "pNotUsedAsHeader")
        form = QuickFixForm()
        ParagraphToHeader(issue).display(form)

        level_input = form.get_inputs()["level"]
        assert level_input["type"] == "text"
        assert level_input["label"] == "Heading level"
        assert level_input["value"] == "h2"

    @pytest.mark.parametrize("markup, path, expected", [
        ("<p>a</p>", [0], 1),
        ("<h2>a</h2><p>b</p>", [1], 3),
        ("<h1>a</h1><h3>b</h3><p>c</p>", [2], 4),
        ("<h6>a</h6><p>b</p>", [1], 6),
        ("<div><h4>a</h4></div><div><p>b</p></div>", [1, 0], 5),
        ("<p>b</p><h2>after</h2>", [0], 1),
    ])
    def test_preferred_level(self, markup, path, expected):
        _, issue = issue_for(markup, path)
        assert ParagraphToHeader(issue).get_preferred_level() == expected

    def test_fix_uses_submitted_level(self):
        root, issue = issue_for("<h1>a</h1><p>b <i>c</i></p>", [1])
        ParagraphToHeader(issue).fix({"level": "H3"})
        assert root[1].tag == "h3"
        assert document.inner_html(root[1]) == "b <i>c</i>"

    def test_fix_defaults_to_preferred_level(self):
        root, issue = issue_for("<h1>a</h1><p>b</p>", [1])
        ParagraphToHeader(issue).fix({})
        assert root[1].tag == "h2"
        assert issue.element is root[1]

    def test_validate(self):
        _, issue = issue_for("<p>b</p>", [0])
        fix = ParagraphToHeader(issue)
        assert fix.validate({"level": "h4"}) == []
        assert fix.validate({"level": "h7"}) == ["Heading level must be one of h1 to h6"]

    def test_possible_levels(self):
        assert ParagraphToHeader.possible_levels() == {"min": 1, "max": 6}
        assert ParagraphToHeader.possible_levels("p;h2;h3;pre") == {"min": 2, "max": 3}
        assert ParagraphToHeader.possible_levels("h4;h2;div") == {"min": 2, "max": 4}
        assert ParagraphToHeader.possible_levels("p;pre") == {"min": 1, "max": 6}
        assert ParagraphToHeader.possible_levels(
            "h1;h2;h3", is_allowed=lambda tag: tag != "h1"
        ) == {"min": 2, "max": 3}
