"""Constants for ical_agenda parsing."""

# Related to rfc5545 text parsing
FOLD = r"\r?\n[ \t]"
ATTR_BEGIN = "begin"
ATTR_END = "end"
ATTR_TZID = "TZID"
ATTR_VALUE = "VALUE"
