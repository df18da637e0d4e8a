"""Prompt composition for slide background generation.

Providers differ in how they like their instructions: multimodal chat-style
models do best with labelled sections, Seedream with one dense sentence.
Both layouts substitute a fixed default for every empty field so no section
is ever missing.
"""

from __future__ import annotations

from dataclasses import dataclass

from .models import GenerationSettings

DEFAULT_STYLE = "现代极简商务"
DEFAULT_COLOR_SCHEME = "专业深蓝与白色搭配"
DEFAULT_REQUIREMENTS = "排版整洁，重点突出，层级分明"
DEFAULT_CONTENT = "标题页，展示主要议题"

STRICT_REFERENCE_NOTE = "请严格参考提供的第一张图片的视觉风格、配色和布局感。"
LOOSE_REFERENCE_NOTE = "请参考提供的图片风格和布局。"
CONTENT_IMAGE_NOTE = (
    "请基于提供的具体内容图片（图表/截图/草图）进行专业化重绘和排版优化，保留关键信息。"
)
CLOSING_DIRECTIVE = "请严格遵循上述风格与配色，输出一张高品质、无乱码的幻灯片设计图。"
COMPACT_CLOSING = "高品质，专业幻灯片，高清，无文字，无水印"


@dataclass(frozen=True)
class PromptTemplate:
    """Provider-specific prompt layout.

    Attributes:
        compact: Single comma-joined sentence instead of labelled sections.
        reference_note: Note added when a reference image is attached.
    """

    compact: bool = False
    reference_note: str = LOOSE_REFERENCE_NOTE


SECTIONED_STRICT = PromptTemplate(reference_note=STRICT_REFERENCE_NOTE)
SECTIONED = PromptTemplate()
COMPACT = PromptTemplate(compact=True)


def _or_default(value: str | None, default: str) -> str:
    value = (value or "").strip()
    return value or default


def _sectioned(
    settings: GenerationSettings,
    slide_content: str,
    has_slide_image: bool,
    template: PromptTemplate,
) -> str:
    sections = [
        "设计一张专业的PPT幻灯片页面。(Design a professional presentation slide.)",
        "\n".join([
            "【设计规范 / Design Spec】",
            f"- 风格流派 (Style): {_or_default(settings.style_description, DEFAULT_STYLE)}",
            f"- 配色方案 (Colors): {_or_default(settings.color_scheme, DEFAULT_COLOR_SCHEME)}",
            "- 具体设计要求 (Requirements): "
            f"{_or_default(settings.design_requirements, DEFAULT_REQUIREMENTS)}",
        ]),
        "\n".join([
            "【本页内容 / Page Content】",
            f"- 核心内容 (Content): {_or_default(slide_content, DEFAULT_CONTENT)}",
        ]),
    ]

    if settings.reference_image:
        sections.append(f"【参考说明 / Reference】\n{template.reference_note}")
    if has_slide_image:
        sections.append(f"【内容优化说明 / Content Image】\n{CONTENT_IMAGE_NOTE}")

    sections.append(CLOSING_DIRECTIVE)
    return "\n\n".join(sections)


def _compact(settings: GenerationSettings, slide_content: str) -> str:
    return (
        f"专业PPT幻灯片设计，{_or_default(settings.style_description, DEFAULT_STYLE)}风格，"
        f"{_or_default(settings.color_scheme, DEFAULT_COLOR_SCHEME)}配色，"
        f"{_or_default(settings.design_requirements, DEFAULT_REQUIREMENTS)}，"
        f"内容：{_or_default(slide_content, DEFAULT_CONTENT)}，"
        f"{COMPACT_CLOSING}"
    )


def compose_prompt(
    settings: GenerationSettings,
    slide_content: str = "",
    slide_image: str | None = None,
    template: PromptTemplate = SECTIONED,
) -> str:
    """Build the generation instruction for one slide.

    Args:
        settings: Deck-wide style settings.
        slide_content: Text of this slide.
        slide_image: Optional base64 content image for this slide.
        template: Provider layout.

    Returns:
        Prompt text.
    """
    if template.compact:
        return _compact(settings, slide_content)
    return _sectioned(settings, slide_content, bool(slide_image), template)
