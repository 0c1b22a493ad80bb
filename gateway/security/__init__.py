from .validation import MISSING_FIELDS, has_required_fields

__all__ = ["MISSING_FIELDS", "has_required_fields"]
