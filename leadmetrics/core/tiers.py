"""Lead tier and audience scale labels."""

# (minimum opportunity score, tier), checked in order
LEAD_TIERS = (
    (80, "hot"),
    (60, "warm"),
    (40, "cool"),
)

# (follower ceiling, scale), checked in order
AUDIENCE_SCALES = (
    (10_000, "nano"),
    (50_000, "micro"),
    (250_000, "mid"),
    (1_000_000, "macro"),
    (3_000_000, "mega"),
)


def lead_tier(opportunity_score: float) -> str:
    for minimum, tier in LEAD_TIERS:
        if opportunity_score >= minimum:
            return tier
    return "cold"


def audience_scale(followers: int) -> str:
    for ceiling, scale in AUDIENCE_SCALES:
        if followers < ceiling:
            return scale
    return "enterprise"
