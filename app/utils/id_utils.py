"""
Primary key generation for all tables.
"""
from nanoid import generate


def generate_id(size: int = 21) -> str:
    """
    Generate a URL-safe nanoid used as a row identifier.

    Args:
        size: Length of the generated ID. Default is 21 characters.
    """
    return generate(size=size)
