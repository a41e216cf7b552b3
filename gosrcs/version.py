"""Version information for gosrcs."""

# gosrcs version
GOSRCS_VERSION_MAJOR = 1
GOSRCS_VERSION_MINOR = 0
GOSRCS_VERSION_PATCH = 0
GOSRCS_VERSION = f"{GOSRCS_VERSION_MAJOR}.{GOSRCS_VERSION_MINOR}.{GOSRCS_VERSION_PATCH}"

# Oldest go.mod "go" directive whose embed rules we follow
GO_LANGUAGE_VERSION = "1.16"


def get_version_string() -> str:
    """Get full version string."""
    return f"gosrcs {GOSRCS_VERSION} (go {GO_LANGUAGE_VERSION}+ modules)"


def get_version_info() -> dict:
    """Get version information as dictionary."""
    return {
        "gosrcs": {
            "major": GOSRCS_VERSION_MAJOR,
            "minor": GOSRCS_VERSION_MINOR,
            "patch": GOSRCS_VERSION_PATCH,
            "version": GOSRCS_VERSION,
        },
        "go": {"version": GO_LANGUAGE_VERSION},
    }
