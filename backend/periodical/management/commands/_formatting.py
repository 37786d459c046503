"""Display helpers shared by the periodical management commands."""

from __future__ import annotations


def format_interval(seconds: float) -> str:
    if seconds >= 3600:
        hours = seconds / 3600
        return f"{hours:.1f} hours" if hours != int(hours) else f"{int(hours)} hours"
    if seconds >= 60:
        minutes = seconds / 60
        return f"{minutes:.1f} minutes" if minutes != int(minutes) else f"{int(minutes)} minutes"
    return f"{seconds:g} seconds"


def format_duration(seconds: float) -> str:
    hours, remainder = divmod(int(seconds), 3600)
    minutes, secs = divmod(remainder, 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    if minutes > 0:
        return f"{minutes}m {secs}s"
    return f"{secs}s"
