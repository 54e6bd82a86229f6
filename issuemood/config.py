"""Configuration for issue sentiment analysis."""

import os

from dotenv import load_dotenv

load_dotenv()

# Auth: optional PAT. Anonymous requests are allowed with a tighter rate limit.
GITHUB_TOKEN = os.environ.get("GITHUB_TOKEN") or None

GITHUB_API_URL = "https://api.github.com"
USER_AGENT = "issuemood"

# Fetch settings
MAX_ISSUES = int(os.environ.get("MAX_ISSUES", "10"))
PER_PAGE = 100  # Max items per API page
PAGE_DELAY_SECONDS = 0.5  # Courtesy pause between comment pages
REQUEST_TIMEOUT_SECONDS = 30.0
RATE_LIMIT_WARNING_THRESHOLD = 10  # Warn when fewer requests than this remain

# Pipeline settings
ISSUE_TIMEOUT_SECONDS = 90.0  # Deadline for one issue's comments + scoring
CONCURRENT_ISSUES = int(os.environ.get("CONCURRENT_ISSUES", "4"))
SCORING_WORKERS = int(os.environ.get("SCORING_WORKERS", str(os.cpu_count() or 4)))

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
