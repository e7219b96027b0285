"""
Papers Router — /api/papers

History of generated papers for the signed-in user.
Endpoints:
  POST   /api/papers                  — save a generated paper
  GET    /api/papers                  — list own papers, newest first
  GET    /api/papers/{id}             — one paper
  DELETE /api/papers/{id}             — delete (owner only)
  GET    /api/papers/{id}/export/txt  — plain-text download
  GET    /api/papers/{id}/export/pdf  — PDF download
"""

import logging
from io import BytesIO
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from questify.database import crud
from questify.database.database import get_db
from questify.database.models import QuestionPaperRecord, User
from questify.generation.paper_exporter import export_filename, export_pdf, export_text
from questify.generation.schemas import QuestionPaper, SavePaperRequest
from questify.routers.auth import get_current_user

router = APIRouter(prefix="/api/papers", tags=["papers"])

log = logging.getLogger("questify.papers")


def _owned_paper(db: Session, paper_id: int, user: User) -> QuestionPaperRecord:
    db_paper = crud.get_paper(db, paper_id)
    # Other users' papers are reported as missing
    if not db_paper or db_paper.user_id != user.id:
        raise HTTPException(status_code=404, detail="Paper not found")
    return db_paper


@router.post("", response_model=QuestionPaper, status_code=201)
def save_paper(
    payload: SavePaperRequest,
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    db_paper = crud.create_paper(
        db,
        user_id=current.id,
        domain=payload.domain,
        sub_domain=payload.sub_domain,
        paper=payload.content,
    )
    log.info("[DB] Saved paper_id=%s for user=%s", db_paper.id, current.id)
    return crud.record_to_paper(db_paper)


@router.get("", response_model=List[QuestionPaper])
def list_papers(
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return [crud.record_to_paper(p) for p in crud.get_papers_for_user(db, current.id)]


@router.get("/{paper_id}", response_model=QuestionPaper)
def get_paper(
    paper_id: int,
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return crud.record_to_paper(_owned_paper(db, paper_id, current))


@router.delete("/{paper_id}")
def delete_paper(
    paper_id: int,
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    db_paper = _owned_paper(db, paper_id, current)
    crud.delete_paper(db, db_paper)
    log.info("[DB] Deleted paper_id=%s", paper_id)
    return {"detail": "Paper deleted"}


@router.get("/{paper_id}/export/txt")
def export_paper_txt(
    paper_id: int,
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    db_paper = _owned_paper(db, paper_id, current)
    content = export_text(crud.record_to_paper(db_paper)).encode("utf-8")
    filename = export_filename(db_paper.domain, db_paper.sub_domain, "txt")
    return StreamingResponse(
        BytesIO(content),
        media_type="text/plain; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{paper_id}/export/pdf")
def export_paper_pdf(
    paper_id: int,
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    db_paper = _owned_paper(db, paper_id, current)
    try:
        buffer = export_pdf(crud.record_to_paper(db_paper))
    except Exception as e:
        log.error("[EXPORT] PDF export failed for paper_id=%s: %s", paper_id, e)
        raise HTTPException(status_code=500, detail="Failed to export PDF. Try printing instead.")
    filename = export_filename(db_paper.domain, db_paper.sub_domain, "pdf")
    return StreamingResponse(
        buffer,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
