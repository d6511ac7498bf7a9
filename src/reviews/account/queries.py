"""Read-side helpers for account administration."""

import math

from protean.utils.globals import current_domain

from reviews.account.user import User
from reviews.utils.query import iter_records


def user_view(user: User) -> dict:
    return {
        "id": str(user.id),
        "username": user.username,
        "email": user.email,
        "role": user.role,
        "account_status": user.account_status,
        "is_email_verified": user.is_email_verified,
        "created_at": user.created_at,
        "last_login_at": user.last_login_at,
        "updated_at": user.updated_at,
    }


def get_user(user_id) -> dict:
    return user_view(current_domain.repository_for(User).get(str(user_id)))


def list_users(search=None, status=None, page=1, limit=20) -> dict:
    """Newest accounts first, optionally filtered by status and a username/email search."""
    page = max(int(page), 1)
    limit = max(int(limit), 1)

    query = current_domain.repository_for(User)._dao.query
    if status:
        query = query.filter(account_status=status)
    query = query.order_by("-created_at")

    if search:
        # Username OR email match has no single-filter equivalent, so match in memory
        needle = search.lower()
        matched = [
            user
            for user in iter_records(query)
            if needle in (user.username or "").lower() or needle in (user.email or "").lower()
        ]
        total = len(matched)
        items = matched[(page - 1) * limit : page * limit]
    else:
        result = query.offset((page - 1) * limit).limit(limit).all()
        total = result.total
        items = result.items

    return {
        "items": [user_view(user) for user in items],
        "total": total,
        "total_pages": math.ceil(total / limit),
        "current_page": page,
    }
