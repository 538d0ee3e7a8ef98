"""Input validation for typed prompt answers."""


def parse_number(raw: str) -> int:
    """Parse a textual answer as an integer.

    Raises ValueError if the text is not a whole number.
    """
    if not isinstance(raw, str) or not raw.strip():
        raise ValueError("empty number")
    return int(raw.strip())


def validate_number(raw: str, minimum: int | None = None, maximum: int | None = None) -> str | None:
    """Check a number answer against optional bounds.

    Returns an error message to show the user, or None if the value is valid.
    """
    try:
        num = parse_number(raw)
    except ValueError:
        return "Please enter a valid number"
    if minimum is not None and num < minimum:
        return f"Value must be at least {minimum}"
    if maximum is not None and num > maximum:
        return f"Value must be at most {maximum}"
    return None
