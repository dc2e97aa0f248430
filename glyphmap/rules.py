"""
Fixed service constants.

Defaults seeded into an empty store and the limits of the import surface.
"""

MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10 MiB
IMPORT_EXTENSIONS = (".json", ".csv", ".txt")
EXPORT_FORMATS = ("json", "csv", "txt")

DEFAULT_CONFIGURATION = {
    "name": "Default Configuration",
    "description": "Default character mapping configuration",
    "case_sensitivity": "sensitive",
    "mapping_mode": "character",
    "output_format": "plain",
    "is_default": True,
}

DEFAULT_RULES = (
    {"source_char": "s", "target_char": "ક", "case_sensitive": True, "is_active": True},
    {"source_char": "a", "target_char": "અ", "case_sensitive": True, "is_active": True},
    {"source_char": "k", "target_char": "ક", "case_sensitive": True, "is_active": True},
)
