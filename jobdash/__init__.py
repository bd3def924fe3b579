# JobDash - Job Application Dashboard Client
"""
JobDash - Client-side data layer for a job application tracking dashboard.

Sign in, track applications, attach resumes, research companies, bookmark
job listings and read aggregate statistics from a remote tracker API.
"""

__version__ = "1.0.0"
__author__ = "JobDash"
__description__ = "Job application tracking dashboard client"
