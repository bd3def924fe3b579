"""
JobDash - Derived views over cached job applications.

Filtering, sorting and dashboard summaries computed locally from the
job store's cache. Nothing here mutates the cache or calls the API.
"""
from collections import Counter
from typing import Dict, Iterable, List, Optional, Tuple, Union

from ..schemas import ApplicationStatus, JobApplication

SORTABLE_FIELDS = ("date_applied", "company", "role", "status", "location", "salary")
ACTIVE_STATUSES = (ApplicationStatus.APPLIED, ApplicationStatus.INTERVIEW)


def filter_jobs(
    jobs: Iterable[JobApplication],
    search: Optional[str] = None,
    status: Union[ApplicationStatus, str, None] = None,
) -> List[JobApplication]:
    """Case-insensitive search over company/role/location plus an exact status filter."""
    result = list(jobs)

    if search:
        term = search.lower()
        result = [
            job for job in result
            if term in job.company.lower()
            or term in job.role.lower()
            or (job.location and term in job.location.lower())
        ]

    if status and status != "All":
        wanted = ApplicationStatus(status)
        result = [job for job in result if job.status == wanted]

    return result


def _sort_key(key: str):
    if key == "date_applied":
        return lambda job: job.date_applied
    if key == "status":
        return lambda job: job.status.value.casefold()
    return lambda job: (getattr(job, key) or "").casefold()


def sort_jobs(
    jobs: Iterable[JobApplication],
    key: str = "date_applied",
    direction: str = "desc",
) -> List[JobApplication]:
    """
    Sort jobs by one field.

    Dates compare chronologically; text fields compare case-insensitively,
    with missing values treated as empty strings. The sort is stable.
    """
    if key not in SORTABLE_FIELDS:
        raise ValueError(f"Cannot sort by {key!r}; choose one of {', '.join(SORTABLE_FIELDS)}")
    if direction not in ("asc", "desc"):
        raise ValueError("direction must be 'asc' or 'desc'")
    return sorted(jobs, key=_sort_key(key), reverse=(direction == "desc"))


def status_counts(jobs: Iterable[JobApplication]) -> Dict[str, int]:
    """Count per status, every status present (zero if unused)."""
    counts = {status.value: 0 for status in ApplicationStatus}
    for job in jobs:
        counts[job.status.value] += 1
    return counts


def recent_applications(jobs: Iterable[JobApplication], limit: int = 5) -> List[JobApplication]:
    return sort_jobs(jobs, "date_applied", "desc")[:limit]


def top_companies(jobs: Iterable[JobApplication], limit: int = 5) -> List[Tuple[str, int]]:
    """Companies with the most applications; ties keep first-seen order."""
    return Counter(job.company for job in jobs).most_common(limit)


def profile_summary(jobs: Iterable[JobApplication]) -> Dict[str, int]:
    """Totals shown on the profile page: all, still active, and offer rate in percent."""
    jobs = list(jobs)
    total = len(jobs)
    active = sum(1 for job in jobs if job.status in ACTIVE_STATUSES)
    offers = sum(1 for job in jobs if job.status == ApplicationStatus.OFFER)
    success_rate = round(offers / total * 100) if total else 0
    return {
        "total_applications": total,
        "active_applications": active,
        "success_rate": success_rate,
    }
