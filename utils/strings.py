"""String processing utilities for the retirement records tools."""


def clean_text(val) -> str:
    """Trim a submitted form value.

    ``None`` becomes the empty string so optional inputs can be passed
    straight through.  Inner whitespace is left untouched.
    """
    if val is None:
        return ""
    return str(val).strip()


def fold(val) -> str:
    """Lower-case form of *val* used for case-insensitive matching.

    ``None`` folds to the empty string.
    """
    if val is None:
        return ""
    return str(val).lower()
