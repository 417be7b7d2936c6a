"""Showdown export text parsing and formatting."""

from .smogon import format_set, format_team, parse_team

__all__ = ["format_set", "format_team", "parse_team"]
