"""
CRUD operations for users and question papers
All database operations go through these functions
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from questify.database import models
from questify.generation.schemas import QuestionPaper


# ==========================================
# USER CRUD
# ==========================================

def get_user(db: Session, user_id: int) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.email == email.lower()).first()


def get_user_by_refresh_token(db: Session, refresh_token: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.refresh_token == refresh_token).first()


def create_user(db: Session, email: str, hashed_password: str) -> models.User:
    db_user = models.User(email=email.lower(), hashed_password=hashed_password)
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def set_refresh_token(db: Session, user: models.User, refresh_token: Optional[str]) -> models.User:
    user.refresh_token = refresh_token
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


# ==========================================
# QUESTION PAPER CRUD
# ==========================================

def create_paper(
    db: Session,
    user_id: int,
    domain: str,
    sub_domain: str,
    paper: QuestionPaper,
) -> models.QuestionPaperRecord:
    """Insert one paper; created_at comes from the database clock."""
    db_paper = models.QuestionPaperRecord(
        user_id=user_id,
        title=paper.title,
        domain=domain,
        sub_domain=sub_domain,
        content=paper.to_content(),
    )
    db.add(db_paper)
    db.commit()
    db.refresh(db_paper)
    return db_paper


def get_paper(db: Session, paper_id: int) -> Optional[models.QuestionPaperRecord]:
    return db.query(models.QuestionPaperRecord).filter(models.QuestionPaperRecord.id == paper_id).first()


def get_papers_for_user(db: Session, user_id: int) -> List[models.QuestionPaperRecord]:
    """All papers owned by a user, newest first."""
    return (
        db.query(models.QuestionPaperRecord)
        .filter(models.QuestionPaperRecord.user_id == user_id)
        .order_by(models.QuestionPaperRecord.created_at.desc(), models.QuestionPaperRecord.id.desc())
        .all()
    )


def delete_paper(db: Session, db_paper: models.QuestionPaperRecord) -> None:
    db.delete(db_paper)
    db.commit()


def record_to_paper(db_paper: models.QuestionPaperRecord) -> QuestionPaper:
    """Stored row → QuestionPaper: the stored content plus the row columns."""
    return QuestionPaper.model_validate({
        **db_paper.content,
        "id": db_paper.id,
        "created_at": db_paper.created_at,
        "domain": db_paper.domain,
        "subDomain": db_paper.sub_domain,
    })
