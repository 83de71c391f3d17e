"""Project document: HTML fragment rendering and PDF export."""

import io
import logging
import re
from dataclasses import dataclass
from datetime import date
from html.parser import HTMLParser
from typing import Any, Dict, List, Optional, Tuple
from xml.sax.saxutils import escape

from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

from doclify.core.config import settings
from doclify.utils.format import sanitize_file_name
from doclify.utils.template_loader import render_template
from doclify.validations.project import TECH_CATEGORIES

logger = logging.getLogger(__name__)

ELEMENT_NOT_FOUND = "Element not found for PDF export"

BADGE_COLORS = {
    "high": "#ffebee",
    "medium": "#fff3e0",
    "low": "#e8f5e8",
    "must_have": "#ffebee",
    "should_have": "#fff3e0",
    "could_have": "#e8f5e8",
}


def _get(obj: Any, key: str, default=None):
    if isinstance(obj, dict):
        return obj.get(key, default)
    return getattr(obj, key, default)


def group_technologies(technologies: list) -> List[Tuple[str, list]]:
    """Known categories first, in their canonical order, then any other one."""
    groups: Dict[str, list] = {}
    for tech in technologies:
        groups.setdefault(_get(tech, "category") or "other", []).append(tech)
    order = [c for c in TECH_CATEGORIES if c in groups]
    order += sorted(c for c in groups if c not in TECH_CATEGORIES)
    return [(category, groups[category]) for category in order]


def sort_milestones(milestones: list) -> list:
    # sin fecha al final
    return sorted(milestones, key=lambda m: (not _get(m, "due_date"), _get(m, "due_date") or ""))


def render(project: Any, children: Optional[Dict[str, Any]] = None, element_id: Optional[str] = None) -> str:
    """Renders the project aggregate as one self-contained HTML block.

    ``children`` uses the gateway resource names (team, technologies,
    objectives, functional_requirements, non_functional_requirements,
    milestones, audiences, stakeholders, payment); missing or empty entries
    just omit their section.
    """
    children = children or {}
    return render_template(
        "document.html",
        element_id=element_id or settings.document_element_id,
        project=project,
        team=children.get("team") or [],
        technology_groups=group_technologies(children.get("technologies") or []),
        audiences=children.get("audiences") or [],
        objectives=children.get("objectives") or [],
        functional_requirements=children.get("functional_requirements") or [],
        non_functional_requirements=children.get("non_functional_requirements") or [],
        milestones=sort_milestones(children.get("milestones") or []),
        payment=children.get("payment"),
        stakeholders=children.get("stakeholders") or [],
        badge_colors=BADGE_COLORS,
        generated_at=date.today(),
    )


def render_draft(draft) -> str:
    """Preview of a wizard draft, before anything is persisted."""
    return render(draft, {
        "team": draft.items("members"),
        "technologies": draft.items("technologies"),
        "objectives": draft.items("objectives"),
        "functional_requirements": draft.items("functional_requirements"),
        "non_functional_requirements": draft.items("non_functional_requirements"),
        "milestones": draft.items("milestones"),
    })


@dataclass
class ExportResult:
    success: bool
    file_name: Optional[str] = None
    content: Optional[bytes] = None
    pages: int = 0
    error: Optional[str] = None


def export_file_name(title: Optional[str], today: Optional[date] = None) -> str:
    return f"{sanitize_file_name(title)}_{(today or date.today()).isoformat()}.pdf"


class _BlockCollector(HTMLParser):
    """Turns the element with ``element_id`` into (style, markup) blocks.

    Markup is ReportLab's paragraph mini-language (<b>, <font>, <br/>).
    """

    VOID = {"br", "img", "hr", "meta", "input", "link"}
    HEADINGS = {"h1": "title", "h2": "heading", "h3": "subheading", "p": "body"}
    CONTAINERS = {"div", "section", "header", "footer"}

    def __init__(self, element_id: str):
        super().__init__(convert_charrefs=True)
        self.element_id = element_id
        self.found = False
        self.blocks: List[Tuple[str, str]] = []
        self._depth = 0
        self._styles: List[str] = []
        self._inline: List[str] = []
        self._buffer: List[str] = []

    def _inside(self) -> bool:
        return self._depth > 0

    def _flush(self):
        markup = re.sub(r"\s+", " ", "".join(self._buffer)).strip()
        self._buffer = []
        while markup.startswith("<br/>"):
            markup = markup[5:].strip()
        if re.sub(r"<[^>]+>", "", markup).strip():
            self.blocks.append((self._styles[-1] if self._styles else "body", markup))

    def handle_starttag(self, tag, attrs):
        attrs = dict(attrs)
        if not self._inside():
            if attrs.get("id") == self.element_id and not self.found:
                self.found = True
                self._depth = 1
            return

        if tag not in self.VOID:
            self._depth += 1

        classes = (attrs.get("class") or "").split()
        if tag in self.HEADINGS:
            self._flush()
            self._styles.append(self.HEADINGS[tag])
        elif tag in self.CONTAINERS:
            self._flush()
            self._styles.append("item" if "item" in classes else (self._styles[-1] if self._styles else "body"))
        elif tag in ("strong", "b"):
            self._buffer.append("<b>")
            self._inline.append("</b>")
        elif tag == "small":
            self._buffer.append('<font size="8" color="#666666">')
            self._inline.append("</font>")
        elif tag == "span" and "badge" in classes:
            self._buffer.append(' <font size="8" color="#1f4e79">[')
            self._inline.append("]</font>")
        elif tag == "br":
            self._buffer.append("<br/>")
        elif tag not in self.VOID:
            self._inline.append("")

    def handle_endtag(self, tag):
        if not self._inside() or tag in self.VOID:
            return
        self._depth -= 1
        if self._depth == 0:
            self._flush()
            return
        if tag in self.HEADINGS or tag in self.CONTAINERS:
            self._flush()
            if self._styles:
                self._styles.pop()
        elif self._inline:
            self._buffer.append(self._inline.pop())

    def handle_data(self, data):
        if self._inside():
            self._buffer.append(escape(data))


def _pdf_styles() -> Dict[str, ParagraphStyle]:
    base = getSampleStyleSheet()
    return {
        "title": base["Title"],
        "heading": base["Heading2"],
        "subheading": base["Heading3"],
        "body": base["BodyText"],
        "item": ParagraphStyle(
            "Item",
            parent=base["BodyText"],
            leftIndent=4 * mm,
            borderPadding=2 * mm,
            spaceBefore=2 * mm,
            spaceAfter=2 * mm,
        ),
    }


def export_to_pdf(project: Any, html: str, source_element_id: Optional[str] = None) -> ExportResult:
    """Builds an A4 PDF from the element ``source_element_id`` of ``html``.

    Never raises: a missing element or any rendering error comes back as
    ``ExportResult(success=False, error=...)``.
    """
    element_id = source_element_id or settings.document_element_id
    try:
        collector = _BlockCollector(element_id)
        collector.feed(html or "")
        collector.close()
        if not collector.found:
            raise LookupError(ELEMENT_NOT_FOUND)

        styles = _pdf_styles()
        story = []
        for style, markup in collector.blocks:
            story.append(Paragraph(markup, styles[style]))
            if style == "title":
                story.append(Spacer(1, 4 * mm))

        title = _get(project, "title")
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            leftMargin=15 * mm,
            rightMargin=15 * mm,
            topMargin=15 * mm,
            bottomMargin=15 * mm,
            title=title or "",
        )
        doc.build(story)
        file_name = export_file_name(title)
        logger.info("PDF exported: %s (%d pages)", file_name, doc.page)
        return ExportResult(success=True, file_name=file_name, content=buffer.getvalue(), pages=doc.page)
    except Exception as exc:
        logger.error("Error exporting to PDF: %s", exc)
        return ExportResult(success=False, error=str(exc) or "Unknown error")
