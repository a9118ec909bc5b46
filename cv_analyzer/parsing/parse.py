from __future__ import annotations

import logging
from io import BytesIO
from zipfile import BadZipFile, ZipFile

import defusedxml.ElementTree as ET

from .models import ExtractedDocument

logger = logging.getLogger(__name__)

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

MEDIA_TYPE_SOURCE_TYPES = {
    "text/plain": "txt",
    "application/pdf": "pdf",
    DOCX_MEDIA_TYPE: "docx",
}
EXTENSION_SOURCE_TYPES = {"txt": "txt", "pdf": "pdf", "docx": "docx"}
_GENERIC_MEDIA_TYPES = {"", "application/octet-stream"}

UNSUPPORTED_MESSAGE = "Only .docx, .txt, and .pdf files are allowed!"

PDF_MAGIC = b"%PDF-"
ZIP_MAGICS = (b"PK\x03\x04", b"PK\x05\x06", b"PK\x07\x08")


class UnsupportedDocumentError(ValueError):
    pass


class ExtractionError(ValueError):
    pass


def resolve_source_type(filename: str, media_type: str | None) -> str:
    declared = (media_type or "").split(";", 1)[0].strip().lower()
    if declared in MEDIA_TYPE_SOURCE_TYPES:
        return MEDIA_TYPE_SOURCE_TYPES[declared]
    if declared in _GENERIC_MEDIA_TYPES:
        ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
        if ext in EXTENSION_SOURCE_TYPES:
            return EXTENSION_SOURCE_TYPES[ext]
    raise UnsupportedDocumentError(UNSUPPORTED_MESSAGE)


def _is_zip_payload(content: bytes) -> bool:
    return any(content.startswith(prefix) for prefix in ZIP_MAGICS)


def _zip_has_paths(content: bytes, prefixes: tuple[str, ...]) -> bool:
    try:
        with ZipFile(BytesIO(content)) as archive:
            names = archive.namelist()
        return any(any(name.startswith(prefix) for prefix in prefixes) for name in names)
    except BadZipFile:
        return False


def _is_probably_text_payload(content: bytes) -> bool:
    if not content:
        return True
    sample = content[:4096]
    if b"\x00" in sample and not sample.startswith((b"\xff\xfe", b"\xfe\xff")):
        return False
    printable = 0
    for byte in sample:
        if byte in (9, 10, 13) or byte >= 32:
            printable += 1
    return (printable / len(sample)) >= 0.75


def validate_signature(source_type: str, content: bytes) -> None:
    if source_type == "pdf" and not content.startswith(PDF_MAGIC):
        raise UnsupportedDocumentError("File signature does not match .pdf content.")
    if source_type == "docx" and (not _is_zip_payload(content) or not _zip_has_paths(content, ("word/",))):
        raise UnsupportedDocumentError("File signature does not match .docx content.")
    if source_type == "txt" and not _is_probably_text_payload(content):
        raise UnsupportedDocumentError("File signature does not match .txt text content.")


def _decode_txt(content: bytes) -> tuple[str, dict[str, str]]:
    for encoding in ("utf-8", "utf-16", "latin-1"):
        try:
            return content.decode(encoding), {"encoding": encoding}
        except UnicodeDecodeError:
            continue
    raise ExtractionError("Unable to decode text file.")


def _decode_pdf(content: bytes) -> tuple[str, dict[str, int]]:
    from pypdf import PdfReader

    reader = PdfReader(BytesIO(content))
    page_chunks: list[str] = []
    for page in reader.pages:
        page_text = page.extract_text() or ""
        if page_text.strip():
            page_chunks.append(page_text)
    return "\n".join(page_chunks), {"pages": len(reader.pages)}


def _extract_docx_text_fallback(content: bytes) -> tuple[str, int]:
    with ZipFile(BytesIO(content)) as archive:
        raw = archive.read("word/document.xml")
    root = ET.fromstring(raw)
    paragraphs: list[str] = []
    paragraph_count = 0
    for paragraph in root.iter():
        if not paragraph.tag.endswith("}p"):
            continue
        paragraph_count += 1
        texts = [node.text for node in paragraph.iter() if node.tag.endswith("}t") and node.text]
        if texts:
            paragraphs.append("".join(texts))
    return "\n".join(paragraphs), paragraph_count


def _decode_docx(content: bytes) -> tuple[str, dict[str, object]]:
    try:
        from docx import Document

        doc = Document(BytesIO(content))
        text = "\n".join(paragraph.text for paragraph in doc.paragraphs if paragraph.text.strip())
        return text, {"paragraphs": len(doc.paragraphs), "parser": "python-docx"}
    except Exception as exc:
        logger.info("docx_parser_fallback reason=%s", exc)
        text, paragraph_count = _extract_docx_text_fallback(content)
        return text, {"paragraphs": paragraph_count, "parser": "zipxml-fallback"}


_DECODERS = {"txt": _decode_txt, "pdf": _decode_pdf, "docx": _decode_docx}


def extract_text(filename: str, content: bytes, media_type: str | None = None) -> ExtractedDocument:
    """Turn an uploaded resume into plain text.

    Raises ``UnsupportedDocumentError`` for anything that is not plain text,
    PDF or DOCX, and ``ExtractionError`` when the document cannot be decoded.
    """
    source_type = resolve_source_type(filename, media_type)
    validate_signature(source_type, content)

    try:
        text, details = _DECODERS[source_type](content)
    except ExtractionError:
        raise
    except Exception as exc:
        raise ExtractionError(f"Unable to extract text from this {source_type.upper()} file: {exc}") from exc

    warnings: list[str] = []
    if not text.strip():
        warnings.append(f"No extractable text found in {source_type.upper()}.")

    return ExtractedDocument(
        filename=filename,
        source_type=source_type,
        text=text,
        parsing_warnings=warnings,
        details=dict(details),
    )
