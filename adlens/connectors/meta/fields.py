"""ADLENS — Graph API field lists and enums."""

# Default fields requested from the insights edge
INSIGHT_FIELDS = (
    "campaign_name,campaign_id,adset_name,adset_id,ad_name,ad_id,"
    "impressions,clicks,spend,reach,ctr,cpc,cpm,"
    "actions,cost_per_action_type,conversions,cost_per_conversion,"
    "frequency,unique_clicks,action_values"
)

# Presets the insights edge accepts natively as ``date_preset``
DATE_PRESETS = frozenset(
    {
        "today",
        "yesterday",
        "last_3d",
        "last_7d",
        "last_14d",
        "last_28d",
        "last_30d",
        "last_90d",
        "this_month",
        "last_month",
    }
)

TIME_BREAKDOWNS = {"day": "1", "week": "7", "month": "monthly"}

INSIGHT_LEVELS = ("account", "campaign", "adset", "ad")

BREAKDOWNS = (
    "device_platform",
    "age",
    "gender",
    "country",
    "publisher_platform",
    "platform_position",
    "region",
    "dma",
    "impression_device",
)

MAX_BULK_IDS = 50
