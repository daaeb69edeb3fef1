"""
Cropping seasons.

May to October is the wet season, November to April the dry season. The
season key uses the date's own calendar year, so December 2025 and
January 2025 are both `dry_2025`.
"""

from django.utils import timezone

WET = 'wet'
DRY = 'dry'

WET_MONTHS = range(5, 11)


def resolve_season(value):
    """Season key (`wet_2025` / `dry_2025`) for a date or datetime."""
    season_type = WET if value.month in WET_MONTHS else DRY
    return f"{season_type}_{value.year}"


def current_season(today=None):
    if today is None:
        today = timezone.localdate()
    return resolve_season(today)


def parse_season(season):
    """Split `wet_2025` into ('wet', 2025). Raises ValueError when malformed."""
    try:
        season_type, year = season.split('_')
        year = int(year)
    except (AttributeError, ValueError):
        raise ValueError(f"Invalid season: {season!r}")
    if season_type not in (WET, DRY):
        raise ValueError(f"Invalid season: {season!r}")
    return season_type, year


def season_label(season):
    """'wet_2025' -> 'Wet 2025'"""
    season_type, year = parse_season(season)
    return f"{season_type.capitalize()} {year}"


def season_end_label(today=None):
    """Closing date of the season containing `today`, as shown on the dashboard."""
    if today is None:
        today = timezone.localdate()
    if today.month in WET_MONTHS:
        return f"October 31, {today.year}"
    year = today.year if today.month <= 4 else today.year + 1
    return f"April 30, {year}"
