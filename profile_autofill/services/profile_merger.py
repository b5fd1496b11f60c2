"""Merge a fresh extraction into the stored profile without clobbering user edits."""

import re
from datetime import date
from typing import AbstractSet, Dict, FrozenSet, Iterable, List, Optional

from profile_autofill.config import MAX_MERGED_SKILLS
from profile_autofill.schemas.profile import (
    Address,
    Education,
    ExtractedProfileData,
    PersonalInfo,
    Skill,
    StoredProfile,
    WorkExperience,
)
from profile_autofill.services.profile_mapper import build_experience_summary, derive_current_title, to_stored_profile
from profile_autofill.utils.date_parser import newest_first_key
from profile_autofill.utils.helpers import deduplicate_by_key, skill_key
from profile_autofill.utils.logger import get_logger

logger = get_logger(__name__)

PERSONAL_FIELDS = ("first_name", "last_name", "email", "phone", "linkedin_url", "portfolio_url")
ADDRESS_FIELDS = ("street", "city", "state", "postal_code", "country")


def _snake(segment: str) -> str:
    return re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", segment).lower()


def normalize_edited_paths(paths: Iterable[str]) -> FrozenSet[str]:
    """"personalInfo.firstName" -> "personal_info.first_name"."""
    return frozenset(".".join(_snake(part) for part in p.split(".") if part) for p in paths if p)


def is_edited(path: str, edited: AbstractSet[str]) -> bool:
    """True when the path or one of its ancestors was edited."""
    parts = path.split(".")
    return any(".".join(parts[:i]) in edited for i in range(1, len(parts) + 1))


def section_touched(section: str, edited: AbstractSet[str]) -> bool:
    """True when the section itself or anything inside it was edited."""
    return any(p == section or p.startswith(section + ".") for p in edited)


def _confidence(extracted: ExtractedProfileData, path: str, category: str) -> float:
    score = extracted.field_confidence.get(path)
    return score if score is not None else extracted.confidence.get(category, 0.0)


def _merge_scalars(
    fields: Iterable[str],
    prefix: str,
    existing: Dict[str, Optional[str]],
    extracted: Dict[str, Optional[str]],
    result: ExtractedProfileData,
    edited: AbstractSet[str],
) -> Dict[str, Optional[str]]:
    merged = dict(existing)
    for field in fields:
        path = f"{prefix}.{field}"
        value = extracted.get(field)
        if is_edited(path, edited) or not value:
            continue
        if _confidence(result, path, "personal_info") > 0:
            merged[field] = value
    return merged


def merge_personal_info(
    existing: PersonalInfo,
    extracted: ExtractedProfileData,
    edited: AbstractSet[str],
) -> PersonalInfo:
    info = extracted.personal_info
    values = _merge_scalars(
        PERSONAL_FIELDS,
        "personal_info",
        existing.model_dump(include=set(PERSONAL_FIELDS)),
        info.model_dump(include=set(PERSONAL_FIELDS)),
        extracted,
        edited,
    )
    address = _merge_scalars(
        ADDRESS_FIELDS,
        "personal_info.address",
        existing.address.model_dump(),
        info.address.model_dump(),
        extracted,
        edited,
    )
    return PersonalInfo(address=Address(**address), **values)


def merge_skills(existing: List[Skill], extracted: ExtractedProfileData, edited: AbstractSet[str]) -> List[Skill]:
    """Union keyed by normalized name; existing spellings and order first, then new skills, capped."""
    if section_touched("skills", edited):
        return list(existing)
    incoming = extracted.skills if extracted.confidence.get("skills", 0.0) > 0 else []
    skills = deduplicate_by_key(list(existing) + list(incoming), key=lambda s: skill_key(s.name))
    if len(skills) > MAX_MERGED_SKILLS:
        logger.info("Merged skills capped at %s (dropped %s)", MAX_MERGED_SKILLS, len(skills) - MAX_MERGED_SKILLS)
    return skills[:MAX_MERGED_SKILLS]


def _replaces(section: str, entries: list, extracted: ExtractedProfileData, edited: AbstractSet[str]) -> bool:
    return bool(entries) and extracted.confidence.get(section, 0.0) > 0 and not section_touched(section, edited)


def is_stale(extracted: ExtractedProfileData, current_fingerprint: Optional[str]) -> bool:
    """A result for a document other than the current one. A new fingerprint on its own is not stale."""
    return bool(current_fingerprint and extracted.fingerprint and extracted.fingerprint != current_fingerprint)


def merge_profiles(
    extracted: ExtractedProfileData,
    existing: Optional[StoredProfile],
    user_edited_fields: Iterable[str] = frozenset(),
    as_of: Optional[date] = None,
    current_fingerprint: Optional[str] = None,
) -> StoredProfile:
    """
    Merge an extraction into the stored profile and return a new profile.

    User-edited paths (or their ancestors) are never overwritten. Scalars take the
    extracted value only when it is present with non-zero confidence. Skills are a
    capped union. Work experience and education are replaced wholesale by a non-empty
    extraction unless the section was edited. When current_fingerprint is given
    (ExtractionCoordinator.current_fingerprint), a result for any other document is
    ignored. Neither input is mutated.
    """
    if is_stale(extracted, current_fingerprint):
        logger.warning(
            "Ignoring stale extraction for document %s (current %s)",
            extracted.fingerprint[:12],
            current_fingerprint[:12],
        )
        return existing.model_copy(deep=True) if existing is not None else StoredProfile()

    if existing is None:
        return to_stored_profile(extracted, as_of)

    edited = normalize_edited_paths(user_edited_fields)

    work_replaced = _replaces("work_experience", extracted.work_experience, extracted, edited)
    if work_replaced:
        work: List[WorkExperience] = list(extracted.work_experience)
    elif section_touched("work_experience", edited):
        work = list(existing.work_experience)
    else:
        work = sorted(existing.work_experience, key=lambda e: newest_first_key(e.end_date, e.current))

    if _replaces("education", extracted.education, extracted, edited):
        education: List[Education] = list(extracted.education)
    elif section_touched("education", edited):
        education = list(existing.education)
    else:
        education = sorted(existing.education, key=lambda e: newest_first_key(e.graduation_date, False))

    current_title = existing.current_title
    experience_summary = existing.experience_summary
    if work_replaced:
        if not is_edited("current_title", edited):
            current_title = derive_current_title(work) or current_title
        if not is_edited("experience_summary", edited):
            experience_summary = build_experience_summary(work, as_of) or experience_summary

    merged = StoredProfile(
        personal_info=merge_personal_info(existing.personal_info, extracted, edited),
        current_title=current_title,
        experience_summary=experience_summary,
        work_experience=work,
        education=education,
        skills=merge_skills(existing.skills, extracted, edited),
        cover_letter=existing.cover_letter,
        resume_text=existing.resume_text,
        document_fingerprint=extracted.fingerprint or existing.document_fingerprint,
        autofill_enabled=existing.autofill_enabled,
    )
    logger.info(
        "Profile merged: work_replaced=%s education=%s skills=%s edited_paths=%s",
        work_replaced,
        len(education),
        len(merged.skills),
        len(edited),
    )
    return merged
