"""
JobDash - Export cached job applications as JSON or CSV.

Works purely on what the job store already holds; no request is made.
"""
from typing import Any, Dict, Iterable, List
import csv
import io
import json

from ..schemas import JobApplication

EXPORT_FIELDS = [
    "id", "company", "role", "status", "date_applied", "location", "salary",
    "link", "contact_person", "contact_email", "resume", "notes", "created_at", "updated_at",
]


def job_to_row(job: JobApplication) -> Dict[str, Any]:
    """Flatten one application into export-friendly primitives."""
    return {
        "id": job.id,
        "company": job.company,
        "role": job.role,
        "status": job.status.value,
        "date_applied": job.date_applied.isoformat(),
        "location": job.location,
        "salary": job.salary,
        "link": job.link,
        "contact_person": job.contact_person,
        "contact_email": job.contact_email,
        "resume": job.resume.original_name or job.resume.name if job.resume else None,
        "notes": job.notes,
        "created_at": job.created_at.isoformat() if job.created_at else None,
        "updated_at": job.updated_at.isoformat() if job.updated_at else None,
    }


def export_jobs(jobs: Iterable[JobApplication], format: str = "json") -> str:
    """
    Serialize applications.

    Args:
        jobs: Applications to export
        format: "json" (list of objects) or "csv" (header row + one row per job)
    """
    rows: List[Dict[str, Any]] = [job_to_row(job) for job in jobs]

    if format == "json":
        return json.dumps({"applications": rows}, indent=2)
    if format == "csv":
        output = io.StringIO()
        writer = csv.DictWriter(output, fieldnames=EXPORT_FIELDS)
        writer.writeheader()
        writer.writerows(rows)
        return output.getvalue()
    raise ValueError(f"Unsupported export format: {format!r} (use 'json' or 'csv')")
