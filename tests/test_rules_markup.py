"""Tests for canonlint.rules.markup — JSX tag, attribute and nesting rules."""

from __future__ import annotations

from canonlint.engine.rule_engine import Rule, Violation, analyze_source
from canonlint.rules.markup import (
    BackgroundImageRounded,
    NoContainerInSection,
    NoInlineStyles,
    NoInlineSvg,
    PreferComponentProps,
    PreferLayoutComponents,
    PreferListComponents,
    PreferTypographyComponents,
)

BLOCK = "src/blocks/hero-1.tsx"
COMPONENT = "src/components/card.tsx"


def _run(rule: Rule, jsx: str, path: str = BLOCK) -> list[Violation]:
    code = f"export default function Hero1() {{\n  return (\n    {jsx}\n  )\n}}\n"
    return analyze_source(code, path, [rule])


class TestNoInlineSvg:
    def test_svg_in_block(self) -> None:
        violations = _run(NoInlineSvg(), '<svg viewBox="0 0 10 10"><path d="M0 0" /></svg>')
        assert len(violations) == 1
        assert violations[0].message.startswith("[Canon 012] Use the Icon component")

    def test_svg_outside_blocks(self) -> None:
        assert _run(NoInlineSvg(), "<svg />", COMPONENT) == []


class TestPreferListComponents:
    def test_ul_and_li(self) -> None:
        violations = _run(PreferListComponents(), "<ul><li>a</li><li>b</li></ul>")
        assert [v.message.split(".")[0] for v in violations] == [
            "[Canon 026] Use the List component instead of <ul>",
            "[Canon 026] Use the Li component instead of <li>",
            "[Canon 026] Use the Li component instead of <li>",
        ]

    def test_list_components_pass(self) -> None:
        assert _run(PreferListComponents(), "<List><Li>a</Li></List>") == []


class TestPreferTypographyComponents:
    def test_paragraph(self) -> None:
        violations = _run(PreferTypographyComponents(), "<p>Hello</p>")
        assert len(violations) == 1
        assert "Paragraph" in violations[0].message

    def test_blockquote(self) -> None:
        violations = _run(PreferTypographyComponents(), "<blockquote>Quote</blockquote>")
        assert "Quote component" in violations[0].message

    def test_span_with_text(self) -> None:
        violations = _run(PreferTypographyComponents(), "<div><span>Label</span></div>")
        assert len(violations) == 1
        assert "Span component" in violations[0].message

    def test_span_inside_typography_component(self) -> None:
        jsx = "<Heading>Big <span>word</span></Heading>"
        assert _run(PreferTypographyComponents(), jsx) == []

    def test_span_gradient_text(self) -> None:
        jsx = '<span className="bg-gradient-to-r bg-clip-text text-transparent">Hi</span>'
        assert _run(PreferTypographyComponents(), jsx) == []

    def test_span_decorative_dot(self) -> None:
        jsx = '<span className="h-2 w-2 rounded-full bg-accent">.</span>'
        assert _run(PreferTypographyComponents(), jsx) == []

    def test_span_min_max_sizing(self) -> None:
        jsx = '<span className="min-w-4 rounded">x</span>'
        assert _run(PreferTypographyComponents(), jsx) == []
        assert _run(PreferTypographyComponents(), '<span className="max-h-2">x</span>') == []

    def test_span_with_sizing_and_text_class(self) -> None:
        jsx = '<span className="w-4 text-sm">x</span>'
        assert len(_run(PreferTypographyComponents(), jsx)) == 1

    def test_span_without_text(self) -> None:
        assert _run(PreferTypographyComponents(), "<span><Icon /></span>") == []

    def test_div_with_text_classes_and_text(self) -> None:
        violations = _run(PreferTypographyComponents(), '<div className="text-lg">Title</div>')
        assert len(violations) == 1
        assert "typography component" in violations[0].message

    def test_div_without_text_classes(self) -> None:
        assert _run(PreferTypographyComponents(), '<div className="p-4">Title</div>') == []

    def test_custom_typography_components(self) -> None:
        rule = PreferTypographyComponents({"components": ["Lead"]})
        assert _run(rule, "<Lead><span>x</span></Lead>") == []
        assert len(_run(rule, "<Heading><span>x</span></Heading>")) == 1

    def test_not_in_blocks(self) -> None:
        assert _run(PreferTypographyComponents(), "<p>Hello</p>", COMPONENT) == []


class TestNoInlineStyles:
    def test_style_attribute(self) -> None:
        violations = _run(NoInlineStyles(), "<div style={{ color: 'red' }}>x</div>")
        assert len(violations) == 1
        assert violations[0].rule_id == "no-inline-styles"
        assert violations[0].line_number == 3

    def test_no_style(self) -> None:
        assert _run(NoInlineStyles(), '<div className="p-4">x</div>') == []


class TestPreferLayoutComponents:
    def test_grid_div(self) -> None:
        violations = _run(PreferLayoutComponents(), '<div className="grid grid-cols-3 gap-4" />')
        assert len(violations) == 1

    def test_grid_via_clsx(self) -> None:
        violations = _run(PreferLayoutComponents(), "<div className={clsx('grid', a)} />")
        assert len(violations) == 1

    def test_flex_div(self) -> None:
        assert _run(PreferLayoutComponents(), '<div className="flex grid-flow-row" />') == []

    def test_grid_component(self) -> None:
        assert _run(PreferLayoutComponents(), '<Grid className="grid" />') == []


class TestBackgroundImageRounded:
    def test_missing_rounded(self) -> None:
        jsx = '<Image src="/bg.jpg" className="absolute inset-0 object-cover" />'
        assert len(_run(BackgroundImageRounded(), jsx)) == 1

    def test_wrong_rounded(self) -> None:
        jsx = '<Image src="/bg.jpg" className="absolute inset-0" rounded="rounded-lg" />'
        assert len(_run(BackgroundImageRounded(), jsx)) == 1

    def test_rounded_none(self) -> None:
        jsx = '<Image src="/bg.jpg" className="absolute inset-0" rounded="rounded-none" />'
        assert _run(BackgroundImageRounded(), jsx) == []

    def test_not_background(self) -> None:
        assert _run(BackgroundImageRounded(), '<Image src="/a.jpg" className="w-full" />') == []


class TestPreferComponentProps:
    def test_paragraph_classes(self) -> None:
        violations = _run(
            PreferComponentProps(), '<Paragraph className="mb-4 text-lg p-2">x</Paragraph>'
        )
        assert [v.data_dict() for v in violations] == [
            {"class_name": "mb-4", "prop_name": "margin"},
            {"class_name": "text-lg", "prop_name": "fontSize"},
        ]
        assert 'should use the "margin" prop' in violations[0].message

    def test_first_matching_prop_wins(self) -> None:
        violations = _run(PreferComponentProps(), '<Heading className="text-center" />')
        assert [v.data_dict()["prop_name"] for v in violations] == ["textAlign"]

    def test_image_props(self) -> None:
        violations = _run(PreferComponentProps(), '<Image className="rounded-xl aspect-video" />')
        assert [v.data_dict()["prop_name"] for v in violations] == ["rounded", "aspect"]

    def test_applies_outside_blocks(self) -> None:
        violations = _run(PreferComponentProps(), '<Button className="mb-2" />', COMPONENT)
        assert len(violations) == 1

    def test_unmapped_component(self) -> None:
        assert _run(PreferComponentProps(), '<Card className="mb-4" />') == []


class TestNoContainerInSection:
    def test_container_inside_section(self) -> None:
        jsx = "<Section><div><Container>x</Container></div></Section>"
        violations = _run(NoContainerInSection(), jsx)
        assert len(violations) == 1
        assert violations[0].message.startswith("[Canon 002] Container inside Section")

    def test_container_after_section(self) -> None:
        jsx = "<>\n<Section>a</Section>\n<Container>b</Container>\n</>"
        assert _run(NoContainerInSection(), jsx) == []

    def test_self_closing_section(self) -> None:
        jsx = "<>\n<Section />\n<Container>b</Container>\n</>"
        assert _run(NoContainerInSection(), jsx) == []

    def test_nested_sections(self) -> None:
        jsx = "<Section><Section>a</Section><Container /></Section>"
        assert len(_run(NoContainerInSection(), jsx)) == 1

    def test_counter_reset_between_files(self) -> None:
        rule = NoContainerInSection()
        # Unclosed Section in a broken file must not leak into the next one.
        analyze_source("const x = <Section><div>", "a.tsx", [rule])
        assert analyze_source("const y = <Container />", "b.tsx", [rule]) == []
