#!/usr/bin/env python3
"""
JobDash - Job Application Export CLI

Export your tracked applications to a JSON or CSV file.
Uses the persisted session if there is one, otherwise signs in with the
given credentials (and keeps that session for next time).

Usage:
    python scripts/export_jobs.py applications.csv --format csv
    python scripts/export_jobs.py applications.json --email me@example.com --password secret
"""
import argparse
import asyncio
import sys
import os
from pathlib import Path

# Add project root to path so we can import jobdash modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from jobdash.dashboard import Dashboard, configure_logging
from jobdash.errors import JobDashError
from jobdash.services.export import export_jobs
from jobdash.services.job_views import sort_jobs


async def run(output: Path, fmt: str, email: str = None, password: str = None) -> int:
    async with Dashboard() as dash:
        if not dash.session.is_authenticated:
            if not (email and password):
                print("Error: No saved session. Pass --email and --password to sign in.")
                return 1
            try:
                await dash.session.login(email, password)
            except JobDashError as e:
                print(f"Error: {e.message}")
                return 1

        if dash.jobs.error:
            print(f"Error: {dash.jobs.error}")
            return 1

        jobs = sort_jobs(dash.jobs.jobs, "date_applied", "desc")
        output.write_text(export_jobs(jobs, fmt), encoding="utf-8")
        print(f"Exported {len(jobs)} applications to {output}")
        return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Export job applications")
    parser.add_argument("output", type=Path, help="File to write")
    parser.add_argument("--format", choices=["json", "csv"], default="json")
    parser.add_argument("--email")
    parser.add_argument("--password")
    args = parser.parse_args()

    configure_logging("WARNING")
    sys.exit(asyncio.run(run(args.output, args.format, args.email, args.password)))
