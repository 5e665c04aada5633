"""Tests for fragment detection: predicate, selectors, extraction, scanning."""

import pytest

from conftest import SEQUENCE_SOURCE, plain_pre, plantuml_block
from detection import (
    extract_code_text,
    extract_fragments,
    is_attached,
    is_diagram_source,
    is_marked_as_plantuml,
    rejection_reason,
    select_candidate_nodes,
)


class TestPredicate:
    """Accept/reject decisions on raw text."""

    @pytest.mark.parametrize("text", [
        "@startuml\nAlice -> Bob: hello\n@enduml",
        "participant A\nA -> B: msg",
        "@startuml\nclass Foo {\n}\n@enduml",
        "@STARTUML\nA -> B\n@ENDUML",
        "actor User\nUser --> System: login",
        "participant A\nA -> B: call\nreturn done",
    ])
    def test_accepts(self, text):
        assert is_diagram_source(text)

    @pytest.mark.parametrize("text, reason", [
        ("@startuml\nAlice Bob\n@enduml", "no diagram syntax between markers"),
        ("const x = 1; function f() { return x; }", "looks like program code"),
        ("hi", "too short"),
        ("", "empty"),
        ("   hi   ", "too short"),
        ("@startuml\nA -> B", "missing @enduml"),
        ("@startuml\nA -> B\n@endjson", "missing @enduml"),
        ("alice -> bob", "no diagram keyword"),
        ("participant A and B", "no arrow"),
    ])
    def test_rejects(self, text, reason):
        assert rejection_reason(text) == reason
        assert not is_diagram_source(text)

    def test_code_exclusion_beats_keywords(self):
        text = "import os\nparticipant A\nA -> B: msg"
        assert rejection_reason(text) == "looks like program code"

    def test_keywords_need_word_boundaries(self):
        # "participants" and "actors" are ordinary prose
        assert rejection_reason("participants -> actors") == "no diagram keyword"


class TestSelectors:
    """Candidate containers, priority and document order."""

    def test_language_tagged_pre_is_single_candidate(self, html_body):
        body = html_body(plantuml_block())
        candidates = select_candidate_nodes(body)
        assert [c.tag for c in candidates] == ["pre"]

    def test_bare_language_code(self, html_body):
        body = html_body('<p><code class="language-plantuml">A -> B</code></p>')
        assert [c.tag for c in select_candidate_nodes(body)] == ["code"]

    def test_highlight_container_is_the_target(self, html_body):
        body = html_body(f'<div class="highlight">{plain_pre()}</div>')
        candidates = select_candidate_nodes(body)
        assert len(candidates) == 1
        assert candidates[0].get("class") == "highlight"

    def test_highlight_wrapper_replaces_language_tagged_pre(self, html_body):
        body = html_body('<div class="highlight"><button>Copy</button>' + plantuml_block() + '</div>')
        candidates = select_candidate_nodes(body)
        assert len(candidates) == 1
        assert candidates[0].get("class") == "highlight"
        assert extract_code_text(candidates[0]) == SEQUENCE_SOURCE

    def test_editor_wrapper_wins_over_nested_pre(self, html_body):
        body = html_body(f'<div class="code-block-wrapper">{plain_pre()}</div>')
        candidates = select_candidate_nodes(body)
        assert len(candidates) == 1
        assert candidates[0].get("class") == "code-block-wrapper"

    def test_document_order_regardless_of_priority(self, html_body):
        body = html_body(plain_pre("first") + plantuml_block("second"))
        texts = [extract_code_text(c) for c in select_candidate_nodes(body)]
        assert texts == ["first", "second"]

    def test_is_attached(self, html_body):
        body = html_body(plain_pre())
        pre = body.find("pre")
        assert is_attached(pre, body)
        body.remove(pre)
        assert not is_attached(pre, body)


class TestExtraction:
    """Text extraction strategies."""

    def test_nested_code(self, html_body):
        body = html_body(plantuml_block())
        assert extract_code_text(body.find("pre")) == SEQUENCE_SOURCE

    def test_code_lines_joined_with_newlines(self, html_body):
        body = html_body(
            '<div class="code-block-wrapper">'
            '<div class="toolbar">Copy</div>'
            '<div class="code-line">@startuml</div>'
            '<div class="code-line">A -> B: hi</div>'
            '<div class="code-line">@enduml</div>'
            '</div>'
        )
        wrapper = body.find("div")
        assert extract_code_text(wrapper) == "@startuml\nA -> B: hi\n@enduml"

    def test_content_area(self, html_body):
        body = html_body(
            '<div class="code-block-wrapper">'
            '<div class="code-block-header">plantuml</div>'
            '<div class="code-block-content">A -> B: hi</div>'
            '</div>'
        )
        assert extract_code_text(body.find("div")) == "A -> B: hi"

    def test_chrome_is_stripped_and_text_kept(self, html_body):
        body = html_body(
            '<pre><span class="lang">plantuml</span>@startuml\nA -> B\n@enduml'
            '<button>Copy</button></pre>'
        )
        assert extract_code_text(body.find("pre")) == "@startuml\nA -> B\n@enduml"

    def test_extraction_does_not_modify_tree(self, html_body):
        body = html_body('<pre><span class="lang">x</span>text<button>Copy</button></pre>')
        extract_code_text(body.find("pre"))
        assert body.find("pre/button") is not None

    @pytest.mark.parametrize("cls, expected", [
        ("language-plantuml", True),
        ("lang-puml", True),
        ("language-puml", True),
        ("hljs PlantUML", True),
        ("language-python", False),
    ])
    def test_trusted_classes(self, html_body, cls, expected):
        body = html_body(f'<pre><code class="{cls}">x</code></pre>')
        assert is_marked_as_plantuml(body.find("pre")) is expected


class TestExtractFragments:
    """One sweep over a document."""

    def test_finds_diagrams_only(self, html_body):
        body = html_body(
            plantuml_block()
            + plain_pre("const x = 1; function f() { return x; }")
            + plain_pre("participant A\nA -> B: msg")
        )
        fragments = extract_fragments(body)
        assert [f.text for f in fragments] == [SEQUENCE_SOURCE, "participant A\nA -> B: msg"]
        assert fragments[0].trusted

    def test_trusted_tag_skips_classification(self, html_body):
        body = html_body(plantuml_block("A to B", lang="puml"))
        fragments = extract_fragments(body)
        assert len(fragments) == 1
        assert fragments[0].trusted

    def test_processed_nodes_are_skipped(self, html_body):
        body = html_body(plantuml_block() + plain_pre("participant A\nA -> B: msg"))
        first = body.find("pre")
        fragments = extract_fragments(body, is_processed=lambda node: node is first)
        assert [f.text for f in fragments] == ["participant A\nA -> B: msg"]

    def test_empty_blocks_are_ignored(self, html_body):
        body = html_body("<pre>   </pre>")
        assert extract_fragments(body) == []
