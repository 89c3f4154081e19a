"""Dashboard counts and analytics breakdowns over the caller's visible leads."""

import re
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Optional

from buyer_crm.config import AppConfig
from buyer_crm.models.analytics import DashboardStats, LeadAnalytics, SourceShare
from buyer_crm.models.caller import Caller
from buyer_crm.models.enums import LeadStatus
from buyer_crm.models.lead import Lead
from buyer_crm.services.leads import fetch_all_visible_leads

CONVERTED_STATUSES = (LeadStatus.QUALIFIED.value, LeadStatus.CLOSED.value)

# PostgREST trims trailing zeros from fractional seconds
_FRACTION = re.compile(r"\.(\d+)")


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    value = _FRACTION.sub(lambda match: "." + match.group(1)[:6].ljust(6, "0"), value, count=1)
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _created_sort_key(lead: Lead) -> datetime:
    return _parse_timestamp(lead.created_at) or datetime.min.replace(tzinfo=timezone.utc)


def build_dashboard_stats(leads: list[Lead]) -> DashboardStats:
    statuses = Counter(lead.status for lead in leads)
    recent = sorted(leads, key=_created_sort_key, reverse=True)[:AppConfig.RECENT_LEADS_LIMIT]
    return DashboardStats(
        total_leads=len(leads),
        new_leads=statuses[LeadStatus.NEW.value],
        qualified_leads=statuses[LeadStatus.QUALIFIED.value],
        closed_leads=statuses[LeadStatus.CLOSED.value],
        recent_leads=recent,
    )


def build_lead_analytics(leads: list[Lead], now: Optional[datetime] = None) -> LeadAnalytics:
    total = len(leads)
    now = now or datetime.now(timezone.utc)
    window_start = now - timedelta(days=AppConfig.ANALYTICS_RECENT_DAYS)
    
    statuses = Counter(lead.status for lead in leads)
    sources = Counter(lead.source for lead in leads)
    priorities = Counter(lead.priority for lead in leads)
    
    recent = 0
    for lead in leads:
        created = _parse_timestamp(lead.created_at)
        if created is not None and created >= window_start:
            recent += 1
    
    converted = sum(statuses[status] for status in CONVERTED_STATUSES)
    top_sources = [
        SourceShare(source=source, count=count, percentage=count / total * 100)
        for source, count in sources.most_common(AppConfig.TOP_SOURCES_LIMIT)
    ]
    
    return LeadAnalytics(
        total_leads=total,
        status_breakdown=dict(statuses),
        source_breakdown=dict(sources),
        priority_breakdown=dict(priorities),
        recent_activity=recent,
        conversion_rate=converted / total * 100 if total else 0.0,
        top_sources=top_sources,
    )


async def get_dashboard_stats(caller: Caller) -> DashboardStats:
    """Total/new/qualified/closed counts and the most recently created leads."""
    return build_dashboard_stats(await fetch_all_visible_leads(caller))


async def get_lead_analytics(caller: Caller, now: Optional[datetime] = None) -> LeadAnalytics:
    """Status, source and priority breakdowns plus recent-activity and conversion figures."""
    return build_lead_analytics(await fetch_all_visible_leads(caller), now=now)
