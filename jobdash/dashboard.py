"""
JobDash - Client entry point.

Wires the API client, token storage, notifier, session and every resource
store together, and owns their lifecycle.

Usage:
    async with Dashboard() as dash:
        if not dash.session.is_authenticated:
            await dash.session.login("me@example.com", "secret")
        await dash.statistics.fetch()
        print(dash.jobs.jobs, dash.statistics.statistics)
"""
from typing import Optional
import logging

import httpx

from .api import ApiClient
from .config import Settings, settings as default_settings
from .services.notifications import Notifier
from .storage import FileTokenStorage
from .stores import (
    CompanyStore, JobStore, ResumeStore, SavedJobStore, SessionStore, StatisticsStore,
)

logger = logging.getLogger("jobdash")


def configure_logging(level: Optional[str] = None) -> None:
    """Console logging for scripts and interactive use."""
    logging.basicConfig(
        level=getattr(logging, (level or default_settings.ui.log_level).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


class Dashboard:
    """
    One signed-in (or signed-out) client.

    Stores are subscribed to the session in construction order; on sign-in
    they all reset and the auto-loading ones (jobs, resumes) fetch
    concurrently. On sign-out every cache is cleared.
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = config or default_settings
        self.notifier = Notifier(history_size=self.settings.ui.notification_history)
        self.api = ApiClient(self.settings.api, transport=transport)
        self.storage = FileTokenStorage(self.settings.storage.session_file)

        self.session = SessionStore(self.api, self.storage, self.notifier)
        self.jobs = JobStore(self.api, self.session, self.notifier)
        self.resumes = ResumeStore(
            self.api, self.session, self.notifier, download_dir=self.settings.storage.download_dir
        )
        self.companies = CompanyStore(self.api, self.session, self.notifier)
        self.saved_jobs = SavedJobStore(self.api, self.session, self.notifier)
        self.statistics = StatisticsStore(self.api, self.session, self.notifier)

    @property
    def stores(self):
        return (self.jobs, self.resumes, self.companies, self.saved_jobs, self.statistics)

    async def start(self) -> bool:
        """Restore a persisted session if there is one. Returns True if signed in."""
        logger.info(f"Starting JobDash client against {self.api.base_url}")
        restored = await self.session.restore()
        if restored:
            logger.info("JobDash ready (signed in)")
        else:
            logger.info("JobDash ready (signed out)")
        return restored

    async def close(self) -> None:
        logger.info("Shutting down JobDash client...")
        await self.api.close()

    async def __aenter__(self) -> "Dashboard":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
