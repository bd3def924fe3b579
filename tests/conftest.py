# tests/conftest.py
"""
Shared fixtures: an in-memory fake of the tracker API (a small FastAPI app)
served to the client through httpx's ASGITransport, so no network is used.
"""
import asyncio
import base64
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
from uuid import uuid4

import httpx
import pytest
from fastapi import Body, Depends, FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse, Response

from jobdash.config import ApiSettings, Settings, StorageSettings, UISettings
from jobdash.dashboard import Dashboard

PDF_BYTES = b"%PDF-1.4\n1 0 obj << /Type /Catalog >> endobj\ntrailer << >>\n%%EOF\n"

ALICE = {"name": "Alice Example", "email": "alice@example.com", "password": "wonderland"}
BOB = {"name": "Bob Example", "email": "bob@example.com", "password": "builder"}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class Gate:
    """Holds a request inside the fake server until released."""

    def __init__(self):
        self.entered = asyncio.Event()
        self.release = asyncio.Event()


class FakeTracker:
    """
    In-memory tracker API.

    Mirrors the real server's wire format (camelCase, `_id`, Mongo-style
    ISO timestamps) closely enough to exercise the client end to end.
    """

    def __init__(self):
        self.users: Dict[str, Dict[str, Any]] = {}
        self.tokens: Dict[str, str] = {}
        self.jobs: Dict[str, Dict[str, Any]] = {}
        self.resumes: Dict[str, Dict[str, Any]] = {}
        self.resume_files: Dict[str, bytes] = {}
        self.companies: Dict[str, Dict[str, Any]] = {}
        self.saved_jobs: Dict[str, Dict[str, Any]] = {}
        self.directory: List[Dict[str, Any]] = [
            {"_id": "d1", "name": "Acme Corp", "industry": "Manufacturing", "jobCount": 12},
            {"_id": "d2", "name": "Acme Labs", "industry": "Research", "jobCount": 3},
            {"_id": "d3", "name": "Globex", "industry": "Energy", "jobCount": 7},
        ]
        self.requests: List[Tuple[str, str]] = []
        self.failures: Dict[Tuple[str, str], Tuple[int, Optional[str]]] = {}
        self.gates: Dict[Tuple[str, str], Gate] = {}
        self.last_body: Any = None
        self.rotate_tokens = False
        self._statistics: Any = None
        self._statistics_set = False
        self._counter = 0
        self.app = self._build_app()

    # --- helpers used by tests ---

    def new_id(self) -> str:
        self._counter += 1
        return f"{self._counter:024x}"

    def add_user(self, name: str, email: str, password: str) -> Dict[str, Any]:
        user = {"_id": self.new_id(), "name": name, "email": email, "password": password, "profilePicture": None}
        self.users[email] = user
        return user

    def issue_token(self, email: str) -> str:
        token = f"token-{uuid4().hex}"
        self.tokens[token] = email
        return token

    def seed_job(self, email: str, **fields) -> Dict[str, Any]:
        job = {
            "_id": self.new_id(),
            "user": self.users[email]["_id"],
            "status": "Applied",
            "dateApplied": "2024-01-15T00:00:00.000Z",
            "createdAt": _now(),
            "updatedAt": _now(),
        }
        job.update(fields)
        self.jobs[job["_id"]] = job
        return job

    def set_statistics(self, body: Any) -> None:
        self._statistics = body
        self._statistics_set = True

    def count(self, method: str, path: str) -> int:
        return self.requests.count((method, path))

    def gate(self, method: str, path: str) -> Gate:
        gate = Gate()
        self.gates[(method, path)] = gate
        return gate

    # --- representations ---

    @staticmethod
    def public_user(user: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in user.items() if k != "password"}

    def job_out(self, job: Dict[str, Any]) -> Dict[str, Any]:
        out = dict(job)
        resume_id = out.get("resume")
        if resume_id in self.resumes:
            resume = self.resumes[resume_id]
            out["resume"] = {"_id": resume_id, "name": resume["name"], "originalName": resume["originalName"]}
        return out

    @staticmethod
    def _owned(records: Dict[str, Dict[str, Any]], user: Dict[str, Any]) -> List[Dict[str, Any]]:
        return [r for r in records.values() if r["user"] == user["_id"]]

    def _find_owned(self, records, record_id: str, user, message: str) -> Dict[str, Any]:
        record = records.get(record_id)
        if record is None or record["user"] != user["_id"]:
            raise HTTPException(404, message)
        return record

    @staticmethod
    def _apply_job_fields(job: Dict[str, Any], body: Dict[str, Any]) -> None:
        for key, value in body.items():
            if key == "resumeId":
                job["resume"] = value
            elif key == "dateApplied":
                job["dateApplied"] = f"{value}T00:00:00.000Z"
            else:
                job[key] = value

    def _computed_statistics(self, user) -> Dict[str, Any]:
        jobs = self._owned(self.jobs, user)
        distribution: Dict[str, int] = {}
        for job in jobs:
            distribution[job["status"]] = distribution.get(job["status"], 0) + 1
        interviews = distribution.get("Interview", 0)
        responded = interviews + distribution.get("Offer", 0) + distribution.get("Rejected", 0)
        return {
            "totalApplications": len(jobs),
            "monthlyApplications": len(jobs),
            "interviewsScheduled": interviews,
            "responseRate": round(responded / len(jobs) * 100) if jobs else 0,
            "statusDistribution": distribution,
            "monthlyTrend": [{"month": "Jan", "count": len(jobs)}],
        }

    # --- app ---

    def _build_app(self) -> FastAPI:
        app = FastAPI()
        tracker = self

        @app.exception_handler(HTTPException)
        async def http_error(request: Request, exc: HTTPException):
            return JSONResponse({"message": exc.detail}, status_code=exc.status_code)

        @app.middleware("http")
        async def record(request: Request, call_next):
            key = (request.method, request.url.path)
            tracker.requests.append(key)
            gate = tracker.gates.get(key)
            if gate is not None:
                gate.entered.set()
                await gate.release.wait()
            if key in tracker.failures:
                status, message = tracker.failures[key]
                return JSONResponse({"message": message} if message else {}, status_code=status)
            return await call_next(request)

        def current_user(authorization: Optional[str] = Header(None)) -> Dict[str, Any]:
            if not authorization or not authorization.startswith("Bearer "):
                raise HTTPException(401, "Not authorized, no token")
            email = tracker.tokens.get(authorization[len("Bearer "):])
            if email is None:
                raise HTTPException(401, "Not authorized, token failed")
            return tracker.users[email]

        # --- users ---

        @app.post("/api/users", status_code=201)
        async def register(body: dict = Body(...)):
            tracker.last_body = body
            if body["email"] in tracker.users:
                raise HTTPException(400, "User already exists")
            user = tracker.add_user(body["name"], body["email"], body["password"])
            return {**tracker.public_user(user), "token": tracker.issue_token(user["email"])}

        @app.post("/api/users/login")
        async def login(body: dict = Body(...)):
            user = tracker.users.get(body.get("email"))
            if user is None or user["password"] != body.get("password"):
                raise HTTPException(401, "Invalid email or password")
            return {**tracker.public_user(user), "token": tracker.issue_token(user["email"])}

        @app.get("/api/users/profile")
        async def get_profile(user=Depends(current_user)):
            return tracker.public_user(user)

        @app.put("/api/users/profile")
        async def update_profile(body: dict = Body(...), user=Depends(current_user), authorization: str = Header(None)):
            tracker.last_body = body
            old_email = user["email"]
            user.update(body)
            if user["email"] != old_email:
                tracker.users[user["email"]] = tracker.users.pop(old_email)
                for token, email in list(tracker.tokens.items()):
                    if email == old_email:
                        tracker.tokens[token] = user["email"]
            out = tracker.public_user(user)
            if tracker.rotate_tokens:
                tracker.tokens.pop(authorization[len("Bearer "):], None)
                out["token"] = tracker.issue_token(user["email"])
            return out

        # --- jobs ---

        @app.get("/api/jobs")
        async def list_jobs(user=Depends(current_user)):
            return [tracker.job_out(job) for job in tracker._owned(tracker.jobs, user)]

        @app.post("/api/jobs", status_code=201)
        async def create_job(body: dict = Body(...), user=Depends(current_user)):
            tracker.last_body = body
            if not body.get("company") or not body.get("role"):
                raise HTTPException(400, "Please add all required fields")
            job = {"_id": tracker.new_id(), "user": user["_id"], "createdAt": _now(), "updatedAt": _now()}
            tracker._apply_job_fields(job, body)
            tracker.jobs[job["_id"]] = job
            return tracker.job_out(job)

        @app.put("/api/jobs/{job_id}")
        async def update_job(job_id: str, body: dict = Body(...), user=Depends(current_user)):
            tracker.last_body = body
            job = tracker._find_owned(tracker.jobs, job_id, user, "Job not found")
            tracker._apply_job_fields(job, body)
            job["updatedAt"] = _now()
            return tracker.job_out(job)

        @app.delete("/api/jobs/{job_id}")
        async def delete_job(job_id: str, user=Depends(current_user)):
            tracker._find_owned(tracker.jobs, job_id, user, "Job not found")
            del tracker.jobs[job_id]
            return {"message": "Job removed"}

        # --- resumes ---

        @app.get("/api/resumes")
        async def list_resumes(user=Depends(current_user)):
            return tracker._owned(tracker.resumes, user)

        @app.post("/api/resumes", status_code=201)
        async def upload_resume(body: dict = Body(...), user=Depends(current_user)):
            tracker.last_body = body
            content = base64.b64decode(body["fileData"])
            resume = {
                "_id": tracker.new_id(),
                "user": user["_id"],
                "name": body["name"],
                "originalName": body["fileName"],
                "fileSize": len(content),
                "contentType": "application/pdf",
                "uploadDate": _now(),
            }
            tracker.resumes[resume["_id"]] = resume
            tracker.resume_files[resume["_id"]] = content
            return resume

        @app.delete("/api/resumes/{resume_id}")
        async def delete_resume(resume_id: str, user=Depends(current_user)):
            tracker._find_owned(tracker.resumes, resume_id, user, "Resume not found")
            del tracker.resumes[resume_id]
            tracker.resume_files.pop(resume_id, None)
            return {"message": "Resume removed"}

        @app.get("/api/resumes/{resume_id}/download")
        async def download_resume(resume_id: str, user=Depends(current_user)):
            resume = tracker._find_owned(tracker.resumes, resume_id, user, "Resume not found")
            return Response(
                content=tracker.resume_files[resume_id],
                media_type="application/pdf",
                headers={"Content-Disposition": f'attachment; filename="{resume["originalName"]}"'},
            )

        # --- companies ---

        @app.get("/api/companies")
        async def list_companies(user=Depends(current_user)):
            return tracker._owned(tracker.companies, user)

        @app.get("/api/companies/search")
        async def search_companies(q: str = "", user=Depends(current_user)):
            term = q.lower()
            return [c for c in tracker.directory if term in c["name"].lower()]

        @app.post("/api/companies", status_code=201)
        async def add_company(body: dict = Body(...), user=Depends(current_user)):
            tracker.last_body = body
            company = {"_id": tracker.new_id(), "user": user["_id"], "jobCount": 0, **body}
            tracker.companies[company["_id"]] = company
            return company

        @app.put("/api/companies/{company_id}")
        async def update_company(company_id: str, body: dict = Body(...), user=Depends(current_user)):
            tracker.last_body = body
            company = tracker._find_owned(tracker.companies, company_id, user, "Company not found")
            company.update(body)
            return company

        @app.delete("/api/companies/{company_id}")
        async def delete_company(company_id: str, user=Depends(current_user)):
            tracker._find_owned(tracker.companies, company_id, user, "Company not found")
            del tracker.companies[company_id]
            return {"message": "Company removed"}

        # --- saved jobs ---

        @app.get("/api/saved-jobs")
        async def list_saved_jobs(user=Depends(current_user)):
            return tracker._owned(tracker.saved_jobs, user)

        @app.post("/api/saved-jobs", status_code=201)
        async def save_job(body: dict = Body(...), user=Depends(current_user)):
            tracker.last_body = body
            saved = {"_id": tracker.new_id(), "user": user["_id"], **body}
            tracker.saved_jobs[saved["_id"]] = saved
            return saved

        @app.delete("/api/saved-jobs/{saved_job_id}")
        async def remove_saved_job(saved_job_id: str, user=Depends(current_user)):
            tracker._find_owned(tracker.saved_jobs, saved_job_id, user, "Saved job not found")
            del tracker.saved_jobs[saved_job_id]
            return {"message": "Saved job removed"}

        # --- statistics ---

        @app.get("/api/statistics")
        async def statistics(user=Depends(current_user)):
            if tracker._statistics_set:
                return tracker._statistics
            return tracker._computed_statistics(user)

        return app


@pytest.fixture
def tracker():
    fake = FakeTracker()
    fake.add_user(**ALICE)
    fake.add_user(**BOB)
    return fake


@pytest.fixture
def config(tmp_path):
    return Settings(
        api=ApiSettings(api_origin="http://testserver"),
        storage=StorageSettings(session_file=tmp_path / "session.json", download_dir=tmp_path / "downloads"),
        ui=UISettings(),
    )


@pytest.fixture
async def make_dashboard(tracker, config):
    """Factory for extra clients sharing the same server and session file."""
    created = []

    def make() -> Dashboard:
        dash = Dashboard(config, transport=httpx.ASGITransport(app=tracker.app))
        created.append(dash)
        return dash

    yield make
    for dash in created:
        await dash.close()


@pytest.fixture
async def dashboard(tracker, config):
    dash = Dashboard(config, transport=httpx.ASGITransport(app=tracker.app))
    yield dash
    await dash.close()


@pytest.fixture
async def signed_in(dashboard):
    await dashboard.session.login(ALICE["email"], ALICE["password"])
    return dashboard
