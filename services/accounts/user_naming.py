"""
Copyright (C) 2025  UserVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of UserVault. See the LICENSE file in the project
root for full license details.
"""
import re
import unicodedata

_SLUG_SEPARATOR_RE = re.compile(r"[\W_]+")


def normalise_full_name(full_name: str) -> str:
    """
    Trim, collapse internal whitespace and upper-case the first character
    of every space separated token. The rest of each token is left as is,
    so the function is idempotent.

    >>> normalise_full_name("  jane   doe ")
    'Jane Doe'
    """
    tokens = full_name.split()
    return " ".join(token[0].upper() + token[1:] for token in tokens)


def generate_slug(full_name: str) -> str:
    """
    URL-safe slug for a full name: lower case, accents folded to ASCII
    where possible, runs of anything that is not a letter or digit replaced
    by a single hyphen.

    >>> generate_slug("Jane Doe")
    'jane-doe'
    """
    folded = unicodedata.normalize("NFKD", full_name)
    folded = "".join(char for char in folded
                     if not unicodedata.combining(char))
    return _SLUG_SEPARATOR_RE.sub("-", folded.lower()).strip("-")


def normalise_email(email: str) -> str:
    """ Emails are stored and compared lower-cased. """
    return email.strip().lower()
