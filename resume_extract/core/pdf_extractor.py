import logging
from io import BytesIO
from typing import List

import pdfplumber

logger = logging.getLogger(__name__)

# Horizontal gap (points) below which characters join into one word
X_TOLERANCE = 1.5
Y_TOLERANCE = 3


def extract_pdf_lines(pdf_bytes: bytes) -> List[str]:
    """
    Extract text lines from a PDF's text layer, page by page.

    Returns an empty list when no page has a text layer (scanned PDFs);
    OCR is not attempted. A blank line separates pages.
    """
    out: List[str] = []
    with pdfplumber.open(BytesIO(pdf_bytes)) as pdf:
        for page_i, page in enumerate(pdf.pages, start=1):
            text = page.extract_text(x_tolerance=X_TOLERANCE, y_tolerance=Y_TOLERANCE) or ""
            lines = [ln.rstrip() for ln in text.splitlines()]
            logger.debug(f"PDF page {page_i}: {len(lines)} line(s)")
            if not any(ln.strip() for ln in lines):
                continue
            if out:
                out.append("")
            out.extend(lines)
    return out
