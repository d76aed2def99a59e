import unicodedata

# Letters, marks and numbers (alphanumerics) plus punctuation.
ALLOWED_CATEGORIES = ('L', 'M', 'N', 'P')


def sanitize_input(text: str) -> str:
    """
    Strip everything but alphanumerics and punctuation from operator input.

    Control characters (CR, LF, NUL, ESC...) never survive, so the result can
    be embedded in a single command line.
    """
    return ''.join(
        ch for ch in text
        if unicodedata.category(ch)[0] in ALLOWED_CATEGORIES
    )
