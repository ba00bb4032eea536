"""Unit tests for application email – layout planning, composition and body leaves."""
from __future__ import annotations

import pytest

from mp_mailer.application.email import (
    DEFAULT_PREAMBLE,
    BodyKind,
    ContentSlots,
    HtmlBody,
    Layout,
    MessageBuildError,
    MissingBodyError,
    Part,
    PlainBody,
    Resource,
    compose,
    plan_layout,
)

PLAIN = PlainBody("Hi")
HTML = HtmlBody('<p>Hi <img src="cid:logo"></p>')
LOGO = Part.from_resource(Resource(b"png-bytes", "image/png", "logo.png"), content_id="logo")
REPORT = Part.from_resource(Resource(b"%PDF", "application/pdf", "report.pdf"))


def _slots(plain=False, html=False, embedded=False, attachments=False) -> ContentSlots:
    return ContentSlots(
        plain=PLAIN if plain else None,
        html=HTML if html else None,
        embedded=(LOGO,) if embedded else (),
        attachments=(REPORT,) if attachments else (),
    )


def _types(message) -> list[str]:
    return [child.get_content_type() for child in message.get_payload()]


# ---------------------------------------------------------------------------
# plan_layout
# ---------------------------------------------------------------------------
class TestPlanLayout:
    @pytest.mark.parametrize(
        "plain, html, embedded, attachments, expected",
        [
            (True, False, False, False, None),
            (True, False, True, False, None),
            (False, True, False, False, None),
            (False, True, True, False, "related"),
            (True, True, False, False, "alternative"),
            (True, True, True, False, "alternative"),
            (True, False, False, True, "mixed"),
            (True, False, True, True, "mixed"),
            (False, True, False, True, "mixed"),
            (False, True, True, True, "mixed"),
            (True, True, False, True, "mixed"),
            (True, True, True, True, "mixed"),
        ],
    )
    def test_root_multipart(self, plain, html, embedded, attachments, expected):
        layout = plan_layout(_slots(plain, html, embedded, attachments))
        assert layout.root_multipart == expected

    @pytest.mark.parametrize("embedded", [False, True])
    @pytest.mark.parametrize("attachments", [False, True])
    def test_no_body_fails(self, embedded, attachments):
        with pytest.raises(MissingBodyError) as exc_info:
            plan_layout(_slots(embedded=embedded, attachments=attachments))
        assert exc_info.value.message == "Message has no body."

    def test_embedded_ignored_without_html(self):
        assert plan_layout(_slots(plain=True, embedded=True)) == Layout(
            body=BodyKind.PLAIN, related=False, mixed=False
        )

    def test_full_layout(self):
        assert plan_layout(_slots(True, True, True, True)) == Layout(
            body=BodyKind.ALTERNATIVE, related=True, mixed=True
        )


# ---------------------------------------------------------------------------
# compose – topologies
# ---------------------------------------------------------------------------
class TestCompose:
    @pytest.mark.parametrize(
        "plain, html, embedded, attachments, expected",
        [
            (True, False, False, False, "text/plain"),
            (True, False, True, False, "text/plain"),
            (False, True, False, False, "text/html"),
            (False, True, True, False, "multipart/related"),
            (True, True, False, False, "multipart/alternative"),
            (True, True, True, False, "multipart/alternative"),
            (True, False, False, True, "multipart/mixed"),
            (True, False, True, True, "multipart/mixed"),
            (False, True, False, True, "multipart/mixed"),
            (False, True, True, True, "multipart/mixed"),
            (True, True, False, True, "multipart/mixed"),
            (True, True, True, True, "multipart/mixed"),
        ],
    )
    def test_top_level_content_type(self, plain, html, embedded, attachments, expected):
        root = compose(_slots(plain, html, embedded, attachments))
        assert root.get_content_type() == expected

    def test_plain_only_is_single_leaf(self):
        root = compose(_slots(plain=True))
        assert not root.is_multipart()
        assert root.get_payload(decode=True).decode() == "Hi"
        assert root.preamble is None

    def test_plain_with_attachment(self):
        root = compose(_slots(plain=True, attachments=True))
        assert _types(root) == ["text/plain", "application/pdf"]
        body, attachment = root.get_payload()
        assert body.get_payload(decode=True).decode() == "Hi"
        assert attachment.get_filename() == "report.pdf"

    def test_alternative_with_related(self):
        root = compose(_slots(plain=True, html=True, embedded=True))
        assert _types(root) == ["text/plain", "multipart/related"]
        related = root.get_payload()[1]
        assert _types(related) == ["text/html", "image/png"]
        assert related.get_payload()[1]["Content-ID"] == "<logo>"

    def test_everything(self):
        root = compose(_slots(True, True, True, True))
        assert _types(root) == ["multipart/alternative", "application/pdf"]
        alternative = root.get_payload()[0]
        assert _types(alternative) == ["text/plain", "multipart/related"]
        assert _types(alternative.get_payload()[1]) == ["text/html", "image/png"]

    def test_html_related_with_attachment(self):
        root = compose(_slots(html=True, embedded=True, attachments=True))
        assert _types(root) == ["multipart/related", "application/pdf"]

    def test_insertion_order_kept(self):
        second = Part.from_resource(Resource(b"gif", "image/gif", "b.gif"), content_id="b")
        extra = Part.from_resource(Resource(b"zip", "application/zip", "a.zip"))
        root = compose(
            ContentSlots(html=HTML, embedded=(LOGO, second), attachments=(REPORT, extra))
        )
        assert _types(root) == ["multipart/related", "application/pdf", "application/zip"]
        assert _types(root.get_payload()[0]) == ["text/html", "image/png", "image/gif"]


# ---------------------------------------------------------------------------
# compose – preamble
# ---------------------------------------------------------------------------
class TestPreamble:
    def test_only_outermost_container_gets_preamble(self):
        root = compose(_slots(True, True, True, True), "outer")
        alternative = root.get_payload()[0]
        related = alternative.get_payload()[1]
        assert root.preamble == "outer"
        assert alternative.preamble is None
        assert related.preamble is None

    def test_alternative_root_gets_preamble(self):
        root = compose(_slots(plain=True, html=True), "outer")
        assert root.preamble == "outer"

    def test_related_root_gets_preamble(self):
        root = compose(_slots(html=True, embedded=True), "outer")
        assert root.preamble == "outer"

    def test_default_preamble(self):
        assert compose(_slots(plain=True, attachments=True)).preamble == DEFAULT_PREAMBLE

    def test_no_preamble(self):
        assert compose(_slots(plain=True, attachments=True), None).preamble is None

    def test_preamble_serialized_before_first_boundary(self):
        text = compose(_slots(plain=True, attachments=True), "outer").as_string()
        body = text.split("\n\n", 1)[1]
        assert body.startswith("outer")


# ---------------------------------------------------------------------------
# Body leaves – content type / charset interaction
# ---------------------------------------------------------------------------
class TestBodyLeaves:
    def test_default_plain_leaf(self):
        leaf = PlainBody("Hi").to_mime()
        assert leaf.get_content_type() == "text/plain"
        assert leaf.get_content_charset() == "utf-8"

    def test_default_html_leaf(self):
        leaf = HtmlBody("<p>Hi</p>").to_mime()
        assert leaf.get_content_type() == "text/html"
        assert leaf.get_payload(decode=True).decode() == "<p>Hi</p>"

    def test_charset_override_on_text_family(self):
        leaf = PlainBody("héllo", charset="ISO-8859-1").to_mime()
        assert leaf.get_content_type() == "text/plain"
        assert leaf.get_content_charset() == "iso-8859-1"
        assert leaf.get_payload(decode=True).decode("iso-8859-1") == "héllo"

    def test_charset_override_replaces_declared_charset(self):
        leaf = PlainBody("hi", "text/plain; charset=UTF-8; format=flowed", "US-ASCII").to_mime()
        assert leaf.get_content_charset() == "us-ascii"
        assert leaf.get_param("format") == "flowed"

    def test_charset_set_for_other_families(self):
        leaf = PlainBody("a: 1", "application/x-yaml", "UTF-8").to_mime()
        assert leaf.get_content_type() == "application/x-yaml"
        assert leaf.get_param("charset") == "UTF-8"
        assert leaf.get_payload(decode=True) == b"a: 1"

    def test_declared_type_used_as_is_without_override(self):
        leaf = PlainBody("hi", "text/enriched; charset=UTF-8").to_mime()
        assert leaf.get_content_type() == "text/enriched"
        assert leaf.get_content_charset() == "utf-8"

    def test_non_text_without_override_keeps_declared_type(self):
        leaf = PlainBody("a: 1", "application/x-yaml").to_mime()
        assert leaf["Content-Type"] == "application/x-yaml"

    def test_charset_override_replaces_declared_parameter(self):
        leaf = PlainBody("a: 1", "application/x-yaml; charset=us-ascii", "UTF-8").to_mime()
        assert leaf.get_params() == [("application/x-yaml", ""), ("charset", "UTF-8")]

    def test_unknown_charset_is_build_error(self):
        with pytest.raises(MessageBuildError) as exc_info:
            PlainBody("hi", charset="no-such-charset").to_mime()
        assert exc_info.value.detail["charset"] == "no-such-charset"

    def test_charset_rules_apply_inside_alternative(self):
        root = compose(ContentSlots(plain=PlainBody("héllo", charset="ISO-8859-1"), html=HTML))
        assert root.get_payload()[0].get_content_charset() == "iso-8859-1"
