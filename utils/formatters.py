"""Shared formatting helper functions for display values."""

import math

import pandas as pd

from core.config import NA_MARKER


def _missing(value) -> bool:
    if value is None or isinstance(value, bool):
        return True
    try:
        return bool(pd.isna(value)) or math.isinf(float(value))
    except (TypeError, ValueError):
        return True


def format_currency(value) -> str:
    """Format a numeric value as currency."""
    if _missing(value):
        return NA_MARKER
    try:
        return f"${value:,.0f}"
    except (ValueError, TypeError):
        return NA_MARKER


def format_percentage(value, decimals=1) -> str:
    """Format a numeric value as percentage."""
    if _missing(value):
        return NA_MARKER
    try:
        return f"{value:.{decimals}f}%"
    except (ValueError, TypeError):
        return NA_MARKER


def format_signed_percentage(value, decimals=1) -> str:
    """Format a change as a signed percentage, e.g. +4.2% or -1.0%."""
    if _missing(value):
        return NA_MARKER
    try:
        sign = "+" if value > 0 else ""
        return f"{sign}{value:.{decimals}f}%"
    except (ValueError, TypeError):
        return NA_MARKER


def format_number(value, decimals=0) -> str:
    """Format a numeric value with commas."""
    if _missing(value):
        return NA_MARKER
    try:
        if decimals == 0:
            return f"{value:,.0f}"
        else:
            return f"{value:,.{decimals}f}"
    except (ValueError, TypeError):
        return NA_MARKER


def format_bound(value, decimals=1) -> str:
    """Format a bucket bound; infinite bounds have no text."""
    if value is None or pd.isna(value):
        return NA_MARKER
    if math.isinf(value):
        return ""
    return format_percentage(value, decimals=decimals)


def format_bucket_range(lower, upper, decimals=1) -> str:
    """Label for a bucket, e.g. '-5.0% to 0.0%', '< 5.0%' or '≥ 40.0%'."""
    lower_text = format_bound(lower, decimals)
    upper_text = format_bound(upper, decimals)
    if not lower_text and not upper_text:
        return "All values"
    if not lower_text:
        return f"< {upper_text}"
    if not upper_text:
        return f"≥ {lower_text}"
    if lower == upper:
        return lower_text
    return f"{lower_text} to {upper_text}"
