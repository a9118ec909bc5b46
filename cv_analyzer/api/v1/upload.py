import logging

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status

from cv_analyzer.analysis import Rubric, get_default_rubric
from cv_analyzer.core.config import settings
from cv_analyzer.core.rate_limit import upload_rate_limit
from cv_analyzer.core.security import require_user_id
from cv_analyzer.parsing.parse import ExtractionError, UnsupportedDocumentError, extract_text
from cv_analyzer.schemas.analysis import AnalysisResponse
from cv_analyzer.services.cv_analysis import analyze_cv
from cv_analyzer.storage import CVStore, CVStoreError, get_cv_store

logger = logging.getLogger(__name__)

router = APIRouter()


async def _read_limited(file: UploadFile) -> bytes:
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(1024 * 64)
        if not chunk:
            break
        total += len(chunk)
        if total > settings.max_upload_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File too large. Maximum allowed size is {settings.max_upload_bytes // (1024 * 1024)} MB.",
            )
        chunks.append(chunk)
    return b"".join(chunks)


@router.post("/upload", response_model=AnalysisResponse)
@upload_rate_limit()
async def upload_cv(
    request: Request,
    cv: UploadFile | None = File(default=None),
    user_id: str = Depends(require_user_id),
    store: CVStore = Depends(get_cv_store),
    rubric: Rubric = Depends(get_default_rubric),
):
    _ = request
    if cv is None or not cv.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded.")

    filename = cv.filename
    content = await _read_limited(cv)

    try:
        document = extract_text(filename=filename, content=content, media_type=cv.content_type)
    except UnsupportedDocumentError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except ExtractionError as exc:
        logger.warning("cv_extraction_failed filename=%s error=%s", filename, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error processing file: {exc}",
        ) from exc

    try:
        return await analyze_cv(
            document.text,
            user_id=user_id,
            filename=filename,
            store=store,
            rubric=rubric,
        )
    except CVStoreError as exc:
        logger.error("cv_persist_failed filename=%s error=%s", filename, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error processing file: {exc}",
        ) from exc
