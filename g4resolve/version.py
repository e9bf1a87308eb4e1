"""Version information for g4resolve."""

# g4resolve version
G4RESOLVE_VERSION_MAJOR = 0
G4RESOLVE_VERSION_MINOR = 3
G4RESOLVE_VERSION_PATCH = 0
G4RESOLVE_VERSION = f"{G4RESOLVE_VERSION_MAJOR}.{G4RESOLVE_VERSION_MINOR}.{G4RESOLVE_VERSION_PATCH}"

# ANTLR grammar syntax we follow for import and header declarations
ANTLR_SYNTAX_VERSION = "4.13.1"

# Grammar file suffix used to turn an import name into a file name
GRAMMAR_FILE_SUFFIX = ".g4"


def get_version_string() -> str:
    """Get full version string."""
    return f"g4resolve {G4RESOLVE_VERSION} (ANTLR {ANTLR_SYNTAX_VERSION} grammars)"


def get_version_info() -> dict:
    """Get version information as dictionary."""
    return {
        "g4resolve": {
            "major": G4RESOLVE_VERSION_MAJOR,
            "minor": G4RESOLVE_VERSION_MINOR,
            "patch": G4RESOLVE_VERSION_PATCH,
            "version": G4RESOLVE_VERSION,
        },
        "antlr": {"version": ANTLR_SYNTAX_VERSION, "suffix": GRAMMAR_FILE_SUFFIX},
    }
