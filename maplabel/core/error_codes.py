"""
Structured warning codes for degraded layout outcomes.
compute_labels never raises for these; it records the keys in LayoutResult.warnings.
Map keys to user-facing messages in the UI.
"""

VIEWPORT_INVALID = "viewport_invalid"
NO_LOCATIONS = "no_locations"
NO_PROJECTED_LOCATIONS = "no_projected_locations"
SLOTS_EXHAUSTED = "slots_exhausted"
SNAP_FALLBACK = "snap_fallback"
RUN_FAILED = "run_failed"

USER_MESSAGES: dict[str, str] = {
    VIEWPORT_INVALID: "Viewport has no area yet. Labels appear once the map has a size.",
    NO_LOCATIONS: "No locations to label.",
    NO_PROJECTED_LOCATIONS: "None of the locations are visible in the current view.",
    SLOTS_EXHAUSTED: "More locations than label slots. Some labels could not be anchored to the grid.",
    SNAP_FALLBACK: "Some labels could not be snapped to a free slot and may overlap.",
    RUN_FAILED: "Run failed. Check the scenario file and inputs.",
}


def user_message(error_key: str | None, fallback: str = "Something went wrong.") -> str:
    """Return a user-facing message for the given error key."""
    if not error_key:
        return fallback
    return USER_MESSAGES.get(error_key, fallback)
