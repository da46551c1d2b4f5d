"""Constants for the Google Sheets reservation store."""

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "User-Agent": "pyridebooking",
}

FIELD_NAME = "entry.131833412"
FIELD_PHONE = "entry.776900145"
FIELD_EMAIL = "entry.121804187"
FIELD_DATE = "entry.1592582104"
FIELD_TIME = "entry.936388405"
FIELD_PICKUP = "entry.1137073125"
FIELD_DESTINATION = "entry.1747359283"
FIELD_PASSENGERS = "entry.240227114"
FIELD_NOTES = "entry.1761921696"
FIELD_AIRPORT_PICKUP = "entry.1268043435"
FIELD_FLIGHT_NUMBER = "entry.888870986"
FIELD_REQUIREMENTS = "entry.1055055925"
FIELD_OTHER_REQUIREMENT = "entry.1055055925.other_option_response"

REQUIREMENT_WHEELCHAIR = "Wheelchair"
REQUIREMENT_CAR_SEAT = "Carseat"
CHECKED_BAGS_NOTE = "Checked bags"
REQUIREMENT_OTHER = "__other_option__"
