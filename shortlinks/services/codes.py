"""Short code generation and input validation.

Pure helpers used by the link registry. Nothing here touches the database:
the uniqueness loop receives the existence check as a callable.
"""

import random
import re
import string
from typing import Awaitable, Callable

from pydantic import AnyHttpUrl, TypeAdapter, ValidationError

from shortlinks.services.exceptions import CodeGenerationExhaustedError

CODE_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits
CODE_PATTERN = re.compile(r"^[A-Za-z0-9]{6,8}$")
HOST_LABEL_PATTERN = re.compile(r"^(?!-)[A-Za-z0-9_-]{1,63}(?<!-)$")

_http_url = TypeAdapter(AnyHttpUrl)

_random = random.SystemRandom()


def generate_code(length: int = 6, alphabet: str = CODE_ALPHABET) -> str:
    """
    Generate a random code of ``length`` characters.

    Each character is drawn uniformly from ``alphabet`` (the 62 ASCII
    letters and digits by default). The result is not checked for uniqueness.
    """
    return "".join(_random.choice(alphabet) for _ in range(length))


def is_valid_code(code) -> bool:
    """Return True if ``code`` is 6 to 8 ASCII letters or digits."""
    if not isinstance(code, str):
        return False
    return CODE_PATTERN.fullmatch(code) is not None


def _is_valid_host(host: str) -> bool:
    if host.startswith("[") and host.endswith("]"):
        return True
    labels = host.rstrip(".").split(".")
    return all(HOST_LABEL_PATTERN.fullmatch(label) for label in labels)


def is_valid_url(url) -> bool:
    """
    Check if a URL is an absolute http or https URL with a usable host.

    Parsing is done by pydantic; each host label must then be letters,
    digits, hyphens or underscores and may not start or end with a hyphen.

    Args:
        url: URL to validate

    Returns:
        bool: True if the URL is valid, False otherwise
    """
    if not isinstance(url, str) or not url.strip():
        return False
    try:
        parsed = _http_url.validate_python(url)
    except ValidationError:
        return False
    return bool(parsed.host) and _is_valid_host(parsed.host)


async def generate_unique_code(
    is_taken: Callable[[str], Awaitable[bool]],
    attempts: int = 5,
    length: int = 6,
    alphabet: str = CODE_ALPHABET,
) -> str:
    """
    Generate a code that ``is_taken`` reports as free.

    Args:
        is_taken: Async predicate returning True when a candidate is in use
        attempts: Number of candidates to try before giving up
        length: Length of each candidate
        alphabet: Characters to draw from

    Returns:
        str: The first free candidate

    Raises:
        CodeGenerationExhaustedError: If every candidate was taken
    """
    for _ in range(attempts):
        candidate = generate_code(length, alphabet)
        if not await is_taken(candidate):
            return candidate

    raise CodeGenerationExhaustedError(
        f"Failed to generate a unique code after {attempts} attempts. "
        "Try again or choose a custom code."
    )
