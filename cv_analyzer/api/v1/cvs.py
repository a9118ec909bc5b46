from fastapi import APIRouter, Depends, HTTPException, Response, status

from cv_analyzer.core.security import require_user_id
from cv_analyzer.schemas.cv import CVListResponse, CVRecord, CVSummary
from cv_analyzer.storage import CVStore, CVStoreError, get_cv_store

router = APIRouter()


def _store_error(exc: CVStoreError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


def _owned_record(store: CVStore, cv_id: int, user_id: str) -> CVRecord:
    try:
        record = store.get(cv_id)
    except CVStoreError as exc:
        raise _store_error(exc) from exc
    if record is None or record.user_id != user_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="CV not found.")
    return record


@router.get("/cvs", response_model=CVListResponse)
def list_cvs(
    user_id: str = Depends(require_user_id),
    store: CVStore = Depends(get_cv_store),
):
    try:
        records = store.list_by_user(user_id)
    except CVStoreError as exc:
        raise _store_error(exc) from exc
    items = [CVSummary(id=record.id, filename=record.filename, created_at=record.created_at) for record in records]
    return CVListResponse(items=items, total=len(items))


@router.get("/cvs/{cv_id}", response_model=CVRecord)
def get_cv(
    cv_id: int,
    user_id: str = Depends(require_user_id),
    store: CVStore = Depends(get_cv_store),
):
    return _owned_record(store, cv_id, user_id)


@router.delete("/cvs/{cv_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_cv(
    cv_id: int,
    user_id: str = Depends(require_user_id),
    store: CVStore = Depends(get_cv_store),
):
    _owned_record(store, cv_id, user_id)
    try:
        store.delete(cv_id)
    except CVStoreError as exc:
        raise _store_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
