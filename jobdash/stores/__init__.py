"""
JobDash - Resource stores.

In-memory mirrors of server resources, kept consistent with confirmed
server responses.

Usage:
    from jobdash.stores import SessionStore, JobStore

    session = SessionStore(api, storage)
    jobs = JobStore(api, session)      # subscribes itself to the session
    await session.login(email, password)
    jobs.jobs                           # auto-fetched after sign-in
"""

from .base import ResourceStore, CollectionStore
from .session import SessionStore
from .jobs import JobStore
from .resumes import ResumeStore
from .companies import CompanyStore
from .saved_jobs import SavedJobStore
from .statistics import StatisticsStore

__all__ = [
    "ResourceStore",
    "CollectionStore",
    "SessionStore",
    "JobStore",
    "ResumeStore",
    "CompanyStore",
    "SavedJobStore",
    "StatisticsStore",
]
