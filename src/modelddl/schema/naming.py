"""Default table and column names derived from model class names."""

import re

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_SIBILANT_ENDINGS = ("s", "x", "z", "ch", "sh")


def snake_case(name: str) -> str:
    """Convert a CamelCase class name to snake_case (``HTTPLog`` -> ``http_log``)."""
    name = _ACRONYM_BOUNDARY.sub(r"\1_\2", name)
    name = _WORD_BOUNDARY.sub(r"\1_\2", name)
    return name.lower()


def pluralize(word: str) -> str:
    """Pluralize an English noun with the regular rules."""
    if len(word) > 1 and word.endswith("y") and word[-2] not in "aeiou":
        return word[:-1] + "ies"
    if word.endswith(_SIBILANT_ENDINGS):
        return word + "es"
    return word + "s"


def default_table_name(class_name: str) -> str:
    """Table name for a model class: snake_case with the last word pluralized."""
    return pluralize(snake_case(class_name))


def default_fk_column(class_name: str, ref_column: str = "id") -> str:
    """Foreign key column pointing at ``ref_column`` of a model (``user_id``)."""
    return f"{snake_case(class_name)}_{ref_column}"
