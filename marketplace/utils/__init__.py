"""Utility helpers for reusable functionality."""

from .datetime import (
    ONE_WEEK,
    add_weeks,
    ensure_app_naive_datetime,
    ensure_app_timezone,
    get_app_timezone,
    now_in_app_naive_datetime,
    now_in_app_timezone,
    whole_weeks_between,
)

__all__ = [
    "ONE_WEEK",
    "add_weeks",
    "ensure_app_naive_datetime",
    "ensure_app_timezone",
    "get_app_timezone",
    "now_in_app_naive_datetime",
    "now_in_app_timezone",
    "whole_weeks_between",
]
