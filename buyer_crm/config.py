"""Application settings read from environment variables."""

import os


class AppConfig:
    """Environment-backed settings with class-level defaults."""
    
    LEADS_PAGE_SIZE = int(os.environ.get("LEADS_PAGE_SIZE", "10"))
    LEADS_MAX_PAGE_SIZE = int(os.environ.get("LEADS_MAX_PAGE_SIZE", "100"))
    RECENT_LEADS_LIMIT = int(os.environ.get("RECENT_LEADS_LIMIT", "5"))
    ANALYTICS_RECENT_DAYS = int(os.environ.get("ANALYTICS_RECENT_DAYS", "7"))
    TOP_SOURCES_LIMIT = 5
    DEFAULT_PROFILE_NAME = os.environ.get("DEFAULT_PROFILE_NAME", "User")
    # Skip e-mail confirmation for self-registered identities (local development only)
    SIGNUP_AUTO_CONFIRM = os.environ.get("SIGNUP_AUTO_CONFIRM", "false").lower() == "true"
    
    # Table names in the hosted project
    LEADS_TABLE = "buyer_leads"
    PROFILES_TABLE = "profiles"
    ACTIVITIES_TABLE = "lead_activities"
