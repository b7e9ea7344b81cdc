import re

# =============================================================================
# Server
# =============================================================================

DEFAULT_PORT = 8080
DEFAULT_HTTP_TIMEOUT = 10  # seconds, applied to every outbound request

# =============================================================================
# Cooldowns & caching
# =============================================================================

RAID_COOLDOWN_SECONDS = 60
GUILD_TTL_SECONDS = 10 * 60
PURGE_AFTER_WINDOWS = 10   # cooldown entries older than this many windows are dropped
PURGE_EVERY = 100          # admitted reports between opportunistic purges

MAX_PLAYERS = 4

# =============================================================================
# External endpoints
# =============================================================================

WYNN_API_BASE = "https://api.wynncraft.com/v3"

WEBHOOK_PATTERN = re.compile(r"https://(?:[\w-]+\.)?discord\.com/api/webhooks/\d+/[\w-]+")

# ---------------------------------------------------------------------------
# Raid icons (thumbnail of the completion embed)
# ---------------------------------------------------------------------------

RAID_ICONS = {
    "The Canyon Colossus":
        "https://static.wikia.nocookie.net/wynncraft_gamepedia_en/images/2/2d/TheCanyonColossusIcon.png",
    "The Nameless Anomaly":
        "https://static.wikia.nocookie.net/wynncraft_gamepedia_en/images/9/92/TheNamelessAnomalyIcon.png",
    "Orphion's Nexus of Light":
        "https://static.wikia.nocookie.net/wynncraft_gamepedia_en/images/6/63/Orphion%27sNexusofLightIcon.png",
    "Nest of the Grootslangs":
        "https://static.wikia.nocookie.net/wynncraft_gamepedia_en/images/5/52/NestoftheGrootslangsIcon.png",
}

RAID_SIGIL_ICON = "https://wynncraft.wiki.gg/images/RaidSigil2.png"
NOTIFICATION_AUTHOR_ICON = "https://i.imgur.com/PTI0zxK.png"

# =============================================================================
# Log shipping
# =============================================================================

LOG_BATCH_CHARS = 1900
LOG_FLUSH_SECONDS = 5
LOG_USERNAME = "Raid Relay"
