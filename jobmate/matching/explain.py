from __future__ import annotations

from typing import List, Optional

from jobmate.matching.reputation import NEUTRAL_REPUTATION
from jobmate.models import Candidate, UrgencyLevel


def _job_label(candidate: Candidate) -> str:
    return f"this {candidate.category} job" if candidate.category else "this job"


def describe_skills(matched: List[str], missing: List[str]) -> str:
    if not matched and not missing:
        return "No specific skills required"
    if not missing:
        return f"Has all required skills: {', '.join(matched)}"
    if matched:
        return f"Has {', '.join(matched)}; missing {', '.join(missing)}"
    return f"Missing required skills: {', '.join(missing)}"


def describe_location(distance_km: Optional[float]) -> str:
    if distance_km is None:
        return "Location information not available"
    return f"{distance_km:.1f} km from job location"


def explain_match(
        candidate: Candidate,
        *,
        skills: float,
        location: float,
        distance_km: Optional[float],
        price: float,
        urgency: float,
        reputation: float,
) -> List[str]:
    """
    Human-readable reasons, one per factor that has something worth saying.
    Scores are on the 0-100 scale, reputation on 0-1.
    """
    out: List[str] = []
    label = _job_label(candidate)

    if skills > 80:
        out.append(f"Your skills are an excellent match for {label}.")
    elif skills > 50:
        out.append(f"You have some of the skills needed for {label}.")
    else:
        out.append("This job may require skills you don't currently list in your profile.")

    if distance_km is None:
        out.append("Location information not available.")
    elif location > 80:
        out.append(f"This job is very close to your location ({distance_km:.1f} km).")
    elif location > 50:
        out.append(f"This job is within a reasonable distance ({distance_km:.1f} km).")
    elif location > 20:
        out.append(f"This job is somewhat far from your location ({distance_km:.1f} km).")
    else:
        out.append(f"This job is quite far from your location ({distance_km:.1f} km).")

    if price > 80:
        out.append("The job budget aligns with your rate.")
    elif price > 50:
        out.append("The job budget is close to your rate.")
    elif candidate.budget is not None and not candidate.budget.is_empty:
        out.append("The job budget is below your rate.")

    if candidate.urgency in (UrgencyLevel.HIGH, UrgencyLevel.EMERGENCY):
        if urgency > 70:
            out.append("This is an urgent job that matches your quick response time.")
        else:
            out.append("This is an urgent job requiring immediate attention.")

    rep = candidate.client_reputation
    if rep is not None and reputation > 0.75:
        out.append(f"This client has an excellent reputation ({rep.total_ratings} ratings).")
    elif rep is not None and reputation < NEUTRAL_REPUTATION - 0.15:
        out.append("This client has mixed reviews.")

    return out
