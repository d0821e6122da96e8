"""
Identifier helpers: random suffixes, blog slugs, usernames and default avatars.

All randomness comes from `secrets` so suffixes are not predictable from earlier ones.
"""

import re
import secrets

# No 0/O, 1/l/I: suffixes are read and typed by humans in profile URLs
UNAMBIGUOUS_ALPHABET: str = "23456789abcdefghijkmnpqrstuvwxyzABCDEFGHJKLMNPQRSTUVWXYZ"
SLUG_ALPHABET: str = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"

USERNAME_SUFFIX_LENGTH: int = 5
SLUG_SUFFIX_LENGTH: int = 21

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")
_WHITESPACE = re.compile(r"\s+")

PROFILE_IMG_COLLECTIONS = [
    "notionists-neutral",
    "adventurer-neutral",
    "fun-emoji",
]
PROFILE_IMG_SEEDS = [
    "Garfield", "Tinkerbell", "Annie", "Loki", "Cleo", "Angel", "Bob", "Mia", "Coco", "Gracie",
    "Bear", "Bella", "Abby", "Harley", "Cali", "Leo", "Luna", "Jack", "Felix", "Kiki",
]


def random_suffix(length: int, alphabet: str = UNAMBIGUOUS_ALPHABET) -> str:
    return "".join(secrets.choice(alphabet) for _ in range(length))


def email_local_part(email: str) -> str:
    return email.split("@")[0]


def slugify_title(title: str) -> str:
    """
    Turn a title into the readable part of a blog slug.

    Every character outside `[A-Za-z0-9]` becomes a space, the result is trimmed and each
    whitespace run becomes a single hyphen: `"Hello, World!"` -> `"Hello-World"`.
    """
    spaced = _NON_ALNUM.sub(" ", title).strip()
    return _WHITESPACE.sub("-", spaced)


def build_blog_id(title: str) -> str:
    """Slugified title plus a random alphanumeric suffix."""
    suffix = random_suffix(SLUG_SUFFIX_LENGTH, SLUG_ALPHABET)
    base = slugify_title(title)
    return f"{base}-{suffix}" if base else suffix


def default_profile_img() -> str:
    collection = secrets.choice(PROFILE_IMG_COLLECTIONS)
    seed = secrets.choice(PROFILE_IMG_SEEDS)
    return f"https://api.dicebear.com/6.x/{collection}/svg?seed={seed}"
