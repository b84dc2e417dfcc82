"""
PDF Renderer — uses PyMuPDF to lay out an application summary.

Approach:
1. Sanitize every string down to what the base-14 Helvetica fonts can encode
2. Wrap text greedily against measured glyph widths (words are never split)
3. Track a baseline cursor from the bottom of the page; start a new page when
   the remaining space is too small for the next section or line
4. Append the pages of the uploaded PDF after a divider section, or substitute
   an explanatory section when the upload cannot be embedded
5. Serialize the document; saving goes through the storage service
"""

import asyncio
import fitz  # PyMuPDF
import logging
import os
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, List, Optional

from portal.core.config import settings
from portal.core.constants import PDF_CONFIG, ERROR_MESSAGES
from portal.core.errors import ApplicationError
from portal.db import models
from portal.services.storage import read_file, save_generated_pdf

logger = logging.getLogger(__name__)

FONT_REGULAR = "helv"  # Helvetica
FONT_BOLD = "hebo"     # Helvetica-Bold
TEXT_COLOR = (0, 0, 0)

# Anything outside printable ASCII (tab/newline/carriage return excepted)
_UNSUPPORTED_CHARS = re.compile(r"[^\x20-\x7E\t\n\r]")
_LINE_BREAK = re.compile(r"\r?\n")


# ─── Text handling ──────────────────────────────────────────────────────────

def sanitize_text(text: Optional[str]) -> str:
    """Drop characters the standard fonts can't encode; tabs become spaces."""
    return _UNSUPPORTED_CHARS.sub("", text or "").replace("\t", " ")


def measure_text(text: str, fontname: str = FONT_REGULAR, fontsize: float = PDF_CONFIG["TEXT_SIZE"]) -> float:
    return fitz.get_text_length(text, fontname=fontname, fontsize=fontsize)


def wrap_text(
    text: str,
    max_width: float,
    fontname: str = FONT_REGULAR,
    fontsize: float = PDF_CONFIG["TEXT_SIZE"],
) -> List[str]:
    """
    Break text into lines no wider than max_width.

    Explicit newlines always break; a blank paragraph becomes an empty line.
    A single word wider than max_width is kept whole on its own line.
    """
    lines: List[str] = []

    for paragraph in _LINE_BREAK.split(sanitize_text(text)):
        words = paragraph.split()
        if not words:
            lines.append("")
            continue

        current = words[0]
        for word in words[1:]:
            candidate = f"{current} {word}"
            if measure_text(candidate, fontname, fontsize) <= max_width:
                current = candidate
            else:
                lines.append(current)
                current = word
        lines.append(current)

    return lines


# ─── Layout ─────────────────────────────────────────────────────────────────

@dataclass
class RenderContext:
    """Document being built plus the vertical cursor on its current page."""
    doc: fitz.Document
    page: fitz.Page
    page_width: float
    page_height: float
    margin: float
    current_y: float  # baseline, measured from the bottom edge

    @classmethod
    def create(
        cls,
        page_width: float = PDF_CONFIG["PAGE_WIDTH"],
        page_height: float = PDF_CONFIG["PAGE_HEIGHT"],
        margin: float = PDF_CONFIG["MARGIN"],
    ) -> "RenderContext":
        doc = fitz.open()
        page = doc.new_page(width=page_width, height=page_height)
        return cls(doc, page, page_width, page_height, margin, page_height - margin)

    @property
    def content_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def page_count(self) -> int:
        return self.doc.page_count

    def new_page(self) -> None:
        # Insert directly after the current page; appended attachment pages stay last
        self.page = self.doc.new_page(self.page.number + 1, width=self.page_width, height=self.page_height)
        self.current_y = self.page_height - self.margin

    def ensure_space(self, required: float) -> bool:
        """Start a new page if the cursor is within `required` points of the bottom margin."""
        if self.current_y < self.margin + required:
            self.new_page()
            return True
        return False

    def draw_text(self, text: str, fontname: str, fontsize: float) -> None:
        # PyMuPDF puts the origin at the top-left corner
        origin = fitz.Point(self.margin, self.page_height - self.current_y)
        self.page.insert_text(origin, text, fontname=fontname, fontsize=fontsize, color=TEXT_COLOR)


def add_title(ctx: RenderContext, title: str) -> None:
    ctx.draw_text(sanitize_text(title), FONT_BOLD, PDF_CONFIG["TITLE_SIZE"])
    ctx.current_y -= PDF_CONFIG["TITLE_SIZE"] + PDF_CONFIG["TITLE_GAP"]


def add_section(ctx: RenderContext, heading: str, content: str) -> None:
    """Draw a bold heading followed by wrapped body text, paginating as needed."""
    ctx.ensure_space(PDF_CONFIG["SECTION_BREAK_SPACE"])

    ctx.draw_text(sanitize_text(heading), FONT_BOLD, PDF_CONFIG["HEADING_SIZE"])
    ctx.current_y -= PDF_CONFIG["HEADING_SIZE"] + PDF_CONFIG["HEADING_GAP"]

    for line in wrap_text(content, ctx.content_width):
        ctx.ensure_space(PDF_CONFIG["LINE_BREAK_SPACE"])
        if line.strip():
            ctx.draw_text(line, FONT_REGULAR, PDF_CONFIG["TEXT_SIZE"])
        ctx.current_y -= PDF_CONFIG["LINE_HEIGHT"]

    ctx.current_y -= PDF_CONFIG["SECTION_SPACING"]


# ─── Section content ────────────────────────────────────────────────────────

def format_application_date(value: Optional[datetime], long_form: bool = True) -> str:
    if value is None:
        return "Not recorded"
    if long_form:
        return f"{value:%B} {value.day}, {value.year} at {value:%I:%M %p}"
    return f"{value.month}/{value.day}/{value.year}"


def build_applicant_info(submission: models.UserSubmission, include_status: bool = True) -> str:
    info = [
        f"Name: {submission.first_name} {submission.last_name}",
        f"Email: {submission.email}",
        f"Phone: {submission.phone or 'Not provided'}",
        f"Application Date: {format_application_date(submission.created_at, long_form=include_status)}",
    ]
    if include_status:
        info.append(f"Status: {submission.status}")
    return "\n".join(info)


def build_document_info(submission: models.UserSubmission) -> str:
    if not submission.uploaded_file_name:
        return "No document uploaded"
    return f"Uploaded File: {submission.uploaded_file_name}\nFile processed and attached to this PDF."


# ─── Embedding ──────────────────────────────────────────────────────────────

def embed_uploaded_pdf(ctx: RenderContext, file_path: str) -> int:
    """
    Append every page of the uploaded PDF after a divider section.

    Never raises: on any failure an "Attached Document" section explaining
    the problem is drawn instead. Returns the number of pages appended.
    """
    name = os.path.basename(file_path)
    source = None

    try:
        logger.info(f"Attempting to embed PDF from: {file_path}")
        if not os.path.isfile(file_path):
            raise FileNotFoundError(f"File not found: {name}")

        data = read_file(file_path)
        logger.info(f"Read {len(data)} bytes from uploaded PDF")

        if not data:
            logger.warning("Uploaded PDF file is empty, skipping embedding")
            add_section(ctx, "Attached Document", "Document file was empty and could not be processed.")
            return 0

        try:
            source = fitz.open(stream=data, filetype="pdf")
            if source.needs_pass and not source.authenticate(""):
                raise ValueError("document is password protected")
        except Exception as e:
            logger.error(f"Failed to load uploaded PDF {name}: {e}")
            add_section(
                ctx,
                "Attached Document",
                f'Document "{name}" was uploaded but could not be processed. '
                "The file may be corrupted or encrypted.",
            )
            return 0

        page_count = source.page_count
        logger.info(f"Uploaded PDF has {page_count} pages")

        if page_count == 0:
            logger.warning("Uploaded PDF has no pages, skipping embedding")
            add_section(ctx, "Attached Document", "Document file contains no pages and could not be processed.")
            return 0

        # Append the pages before drawing the divider; a failed copy is rolled back
        current = ctx.page.number
        before = ctx.page_count
        try:
            ctx.doc.insert_pdf(source)
            if ctx.page_count - before != page_count:
                raise ValueError(f"copied {ctx.page_count - before} of {page_count} pages")
        except Exception as e:
            logger.error(f"Failed to copy pages from uploaded PDF {name}: {e}")
            if ctx.page_count > before:
                ctx.doc.delete_pages(from_page=before, to_page=ctx.page_count - 1)
            ctx.page = ctx.doc[current]
            add_section(
                ctx,
                "Attached Document",
                f'Document "{name}" was uploaded but pages could not be copied. '
                "The file may have restrictions or be corrupted.",
            )
            return 0

        ctx.page = ctx.doc[current]
        add_section(
            ctx,
            "Attached Resume/Document",
            f"The following {page_count} page(s) contain the uploaded document:",
        )
        logger.info(f"Successfully embedded {page_count} pages from uploaded PDF")
        return page_count

    except Exception as e:
        logger.error(f"Error embedding uploaded PDF: {e}")
        add_section(
            ctx,
            "Attached Document",
            f"Document was uploaded but could not be embedded in this PDF. Error: {e}",
        )
        return 0

    finally:
        if source is not None:
            source.close()


# ─── Generators ─────────────────────────────────────────────────────────────

def _render_full(ctx: RenderContext, submission: models.UserSubmission) -> None:
    add_title(ctx, "Application Summary")
    add_section(ctx, "Applicant Information", build_applicant_info(submission))
    add_section(ctx, "Current Job Description", submission.job_description)
    add_section(ctx, "Uploaded Document", build_document_info(submission))

    if submission.uploaded_file_path:
        embed_uploaded_pdf(ctx, submission.uploaded_file_path)


def _render_simple(ctx: RenderContext, submission: models.UserSubmission) -> None:
    add_title(ctx, "Application Summary")
    add_section(ctx, "Applicant Information", build_applicant_info(submission, include_status=False))
    add_section(ctx, "Job Description", submission.job_description)


GENERATORS: Dict[str, Callable[[RenderContext, models.UserSubmission], None]] = {
    "full": _render_full,
    "simple": _render_simple,
}


def render_submission_pdf(submission: models.UserSubmission, variant: Optional[str] = None) -> bytes:
    """Build the summary PDF in memory and return its bytes."""
    variant = (variant or settings.PDF_GENERATOR).strip().lower()
    generator = GENERATORS.get(variant)
    if generator is None:
        raise ApplicationError(f"Unknown PDF generator: {variant}", 500)

    ctx = RenderContext.create()
    try:
        ctx.doc.set_metadata({
            "title": "Application Summary",
            "author": settings.PROJECT_NAME,
            "subject": f"Application {submission.id}",
        })
        generator(ctx, submission)
        pdf_bytes = ctx.doc.tobytes(garbage=3, deflate=True)
    finally:
        ctx.doc.close()

    if not pdf_bytes:
        raise ApplicationError("Generated PDF is empty", 500)
    return pdf_bytes


async def generate_pdf(submission: models.UserSubmission, variant: Optional[str] = None) -> str:
    """Render the summary for a submission and save it. Returns the saved path."""
    try:
        logger.info(f"Starting PDF generation for submission {submission.id}")
        # Layout is CPU bound; keep it off the event loop
        loop = asyncio.get_running_loop()
        pdf_bytes = await loop.run_in_executor(None, render_submission_pdf, submission, variant)
        pdf_path = await save_generated_pdf(submission.id, pdf_bytes)
        logger.info(f"PDF generated successfully: {pdf_path}")
        return pdf_path
    except ApplicationError:
        raise
    except Exception as e:
        logger.error(f"PDF generation error for submission {submission.id}: {e}")
        message = str(e) or ERROR_MESSAGES["PDF_GENERATION_FAILED"]
        raise ApplicationError(f"PDF generation failed: {message}", 500)
