"""Scheduling constants and store defaults."""

from datetime import timedelta

BUFFER_BEFORE_MINUTES = 120
BUFFER_AFTER_MINUTES = 105
DAY_MINUTES = 1440

MIN_ADVANCE = timedelta(hours=3)
MAX_ADVANCE_HORIZON = timedelta(days=90)
PICKUP_GRANULARITY_MINUTES = 15
MAX_SUGGESTIONS = 3

BASE_CAPACITY = 6

CACHE_TTL_SECONDS = 60.0

DEFAULT_TIMEZONE = "America/New_York"
BUSINESS_PHONE = "(980) 422-9125"

DEFAULT_RESERVATIONS_URL = (
    "https://script.google.com/macros/s/"
    "AKfycbzlJKEyRE9jriEa27errgYXQQA4mcVA0bZU1nxoILvCcBpXaW2FkCPwKZp1yewvDvKo/exec"
)
DEFAULT_FORM_URL = (
    "https://docs.google.com/forms/d/e/"
    "1FAIpQLSelLJ8Yqj8jHXreIB3DW8MvsBUtHea8DB7UTjyaYkM3Q2RbTA/formResponse"
)
