"""
User Service

Local single-user account management: the account row is created on first
use, deleting it cascades to every owned row, and export gathers a user's
data into one JSON-ready dict.
"""

import logging
from typing import Any, Dict, Optional

from src.common.config import Config
from src.common.repositories import Collections, get_repository, new_id, to_api, utcnow
from src.validations.settings import UserSettings

logger = logging.getLogger(__name__)

# Deletion order: dependents first, the user row last
CASCADE_COLLECTIONS = (
    Collections.APPLICATIONS,
    Collections.SOFT_SKILLS,
    Collections.RESUMES,
    Collections.USER_SETTINGS,
)


def get_or_create_local_user() -> Dict[str, Any]:
    """
    Return the local user document, creating it on first call.

    Returns:
        User document (stored shape)
    """
    users = get_repository(Collections.USERS)
    email = Config.LOCAL_USER_EMAIL.lower()

    user = users.find_one({"email": email})
    if user:
        return user

    now = utcnow()
    user = {
        "_id": new_id(),
        "email": email,
        "name": Config.LOCAL_USER_NAME,
        "created_at": now,
        "updated_at": now,
    }
    users.insert_one(user)
    logger.info(f"Created local user {email}")
    return user


def get_or_create_settings(user_id: str) -> Dict[str, Any]:
    """
    Return a user's settings document, creating defaults on first read.

    Returns:
        Settings document with a full ``settings`` field (API shape)
    """
    repo = get_repository(Collections.USER_SETTINGS)
    document = repo.find_one({"user_id": user_id})
    if document:
        document["settings"] = UserSettings.model_validate(document.get("settings") or {}).to_api()
        return document

    now = utcnow()
    document = {
        "_id": new_id(),
        "user_id": user_id,
        "settings": UserSettings().to_api(),
        "created_at": now,
        "updated_at": now,
    }
    repo.insert_one(document)
    logger.info(f"Created default settings for user {user_id}")
    return document


def delete_user_cascade(user_id: str) -> Dict[str, int]:
    """
    Delete a user and every row they own.

    Args:
        user_id: User id

    Returns:
        Deleted counts per collection
    """
    counts: Dict[str, int] = {}
    for collection in CASCADE_COLLECTIONS:
        result = get_repository(collection).delete_many({"user_id": user_id})
        counts[collection] = result.deleted_count

    result = get_repository(Collections.USERS).delete_one({"_id": user_id})
    counts[Collections.USERS] = result.deleted_count

    logger.info(f"Deleted user {user_id}: {counts}")
    return counts


def export_user_data(
    user: Dict[str, Any],
    include_resumes: bool = True,
    include_jobs: bool = True,
    include_applications: bool = True,
    include_settings: bool = True,
) -> Dict[str, Any]:
    """
    Gather a user's data for download.

    Jobs are not owned by a user; the export includes the jobs the user's
    applications reference. Soft-skill assessments travel with the settings
    section.

    Returns:
        {exportedAt, user, resumes?, applications?, jobs?, settings?, softSkills?}
    """
    user_id = user["_id"]
    export: Dict[str, Any] = {
        "exportedAt": utcnow().isoformat(),
        "user": to_api(user),
    }

    if include_resumes:
        resumes = get_repository(Collections.RESUMES).find({"user_id": user_id})
        export["resumes"] = [to_api(r) for r in resumes]

    applications = get_repository(Collections.APPLICATIONS).find({"user_id": user_id})
    if include_applications:
        export["applications"] = [to_api(a) for a in applications]

    if include_jobs:
        job_ids = sorted({a["job_id"] for a in applications if a.get("job_id")})
        jobs = get_repository(Collections.JOBS).find({"_id": {"$in": job_ids}}) if job_ids else []
        export["jobs"] = [to_api(j) for j in jobs]

    if include_settings:
        settings: Optional[Dict[str, Any]] = get_repository(Collections.USER_SETTINGS).find_one({"user_id": user_id})
        export["settings"] = settings.get("settings") if settings else None
        soft_skills = get_repository(Collections.SOFT_SKILLS).find({"user_id": user_id})
        export["softSkills"] = [to_api(s) for s in soft_skills]

    logger.info(f"Exported data for user {user_id}")
    return export
