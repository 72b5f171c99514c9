"""
Identity resolution: email -> canonical storage key
"""

KEY_SEPARATOR = "-"
PROFILE_PICTURE_SUFFIX = "_profile_picture.png"

def canonicalize(email: str) -> str:
    """Replace every '.' and '@' so an email can serve as a storage path segment.

    Emails differing only by these characters collide, e.g. ``a.b@x.com`` and
    ``a-b@x.com`` both map to ``a-b-x-com``.
    """
    return email.replace(".", KEY_SEPARATOR).replace("@", KEY_SEPARATOR)

def profile_picture_filename(email: str) -> str:
    return canonicalize(email) + PROFILE_PICTURE_SUFFIX
