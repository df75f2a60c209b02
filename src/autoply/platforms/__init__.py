"""Platform adapters and the registry that maps platform ids and URLs to them."""

import re
from typing import Dict, List, Tuple, Union

from autoply.core.errors import UnsupportedPlatform
from autoply.core.models import Platform
from autoply.platforms import (
    ashby,
    bamboohr,
    generic,
    greenhouse,
    jobvite,
    lever,
    linkedin,
    pinpoint,
    smartrecruiters,
    teamtailor,
    workday,
)
from autoply.platforms.base import AdapterSpec, PlatformAdapter

ADAPTERS: Dict[Platform, PlatformAdapter] = {
    module.ADAPTER.platform: module.ADAPTER
    for module in (
        greenhouse,
        lever,
        linkedin,
        ashby,
        jobvite,
        smartrecruiters,
        pinpoint,
        teamtailor,
        workday,
        bamboohr,
        generic,
    )
}

# Checked in order; anything unmatched is generic
PLATFORM_PATTERNS: List[Tuple[Platform, "re.Pattern[str]"]] = [
    (Platform.GREENHOUSE, re.compile(r"boards\.greenhouse\.io|greenhouse\.io/.*/jobs")),
    (Platform.LINKEDIN, re.compile(r"linkedin\.com/jobs")),
    (Platform.LEVER, re.compile(r"jobs\.lever\.co")),
    (Platform.JOBVITE, re.compile(r"jobs\.jobvite\.com")),
    (Platform.SMARTRECRUITERS, re.compile(r"jobs\.smartrecruiters\.com")),
    (Platform.PINPOINT, re.compile(r"\.pinpointhq\.com")),
    (Platform.TEAMTAILOR, re.compile(r"\.teamtailor\.com")),
    (Platform.WORKDAY, re.compile(r"\.myworkdayjobs\.com|workday\.com/.*/job")),
    (Platform.ASHBY, re.compile(r"jobs\.ashbyhq\.com")),
    (Platform.BAMBOOHR, re.compile(r"[^./]+\.bamboohr\.com")),
]


def detect_platform(url: str) -> Platform:
    """Platform whose URL pattern matches, or generic."""
    for platform, pattern in PLATFORM_PATTERNS:
        if pattern.search(url):
            return platform
    return Platform.GENERIC


def get_adapter(platform: Union[str, Platform]) -> PlatformAdapter:
    """Registered adapter for a platform id."""
    try:
        return ADAPTERS[Platform(platform)]
    except (KeyError, ValueError) as e:
        raise UnsupportedPlatform(f"No adapter available for platform: {platform}") from e


def supported_platforms() -> List[Platform]:
    return list(ADAPTERS)


__all__ = [
    "ADAPTERS",
    "PLATFORM_PATTERNS",
    "AdapterSpec",
    "PlatformAdapter",
    "detect_platform",
    "get_adapter",
    "supported_platforms",
]
