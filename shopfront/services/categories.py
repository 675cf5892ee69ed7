from typing import Iterable, List, Optional
import logging
import math

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, col, func, select

from ..exceptions import AuthenticationError, InternalError, NotFoundError, ValidationError
from ..models import Category, User
from ..schemas.category import CategoryPage, CategoryRead, Pagination

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 6
MAX_PAGE_SIZE = 100


def list_categories(db: Session, page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> CategoryPage:
    """Return one name-ascending page of categories with pagination metadata.

    A page past the end is not an error; it comes back empty.
    """
    if page < 1:
        raise ValidationError("page must be at least 1", details={"page": page})
    if not 1 <= limit <= MAX_PAGE_SIZE:
        raise ValidationError(f"limit must be between 1 and {MAX_PAGE_SIZE}", details={"limit": limit})

    categories = db.exec(
        select(Category)
        .order_by(Category.name)
        .offset((page - 1) * limit)
        .limit(limit)
    ).all()
    total = db.exec(select(func.count()).select_from(Category)).one()

    total_pages = math.ceil(total / limit)
    return CategoryPage(
        categories=[CategoryRead.model_validate(category) for category in categories],
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next_page=page < total_pages,
            has_previous_page=page > 1,
        ),
    )


def get_user_interests(db: Session, user_id: Optional[str]) -> List[Category]:
    if user_id is None:
        raise AuthenticationError("User not authenticated")

    user = db.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")
    return list(user.interests)


def save_user_interests(db: Session, user_id: Optional[str], category_ids: Iterable[str]) -> List[Category]:
    """
    Replace the user's interest set with exactly ``category_ids``.

    Ids left out are removed and new ones added in a single transaction. If any
    id is unknown nothing is written.
    """
    if user_id is None:
        raise AuthenticationError("User not authenticated")

    requested = list(dict.fromkeys(category_ids))
    categories = []
    if requested:
        categories = db.exec(select(Category).where(col(Category.id).in_(requested))).all()

    found = {category.id for category in categories}
    invalid_ids = [category_id for category_id in requested if category_id not in found]
    if invalid_ids:
        raise ValidationError(
            f"Invalid category IDs: {', '.join(invalid_ids)}",
            details={"invalid_ids": invalid_ids},
        )

    try:
        # Row lock serialises concurrent replacements for the same user
        user = db.exec(select(User).where(User.id == user_id).with_for_update()).first()
        if not user:
            db.rollback()
            raise NotFoundError("User not found")

        user.interests = list(categories)
        db.add(user)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Saving interests failed for user {user_id}")
        raise InternalError("Something went wrong while saving interests") from e

    db.refresh(user)
    logger.info(f"Interests updated for user {user_id}: {len(user.interests)} categories")
    return list(user.interests)
