"""
Session CHAP credential file loader.

The file uses the open-iscsi property names, one ``key=value`` per line.
"""

from __future__ import annotations

import configparser
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from targetd_provisioner.targetd.exceptions import ChapCredentialsError

IN_USER_KEY = "node.session.auth.username"
IN_PASSWORD_KEY = "node.session.auth.password"
OUT_USER_KEY = "node.session.auth.username_in"
OUT_PASSWORD_KEY = "node.session.auth.password_in"

_SECTION = "chap"


@dataclass(frozen=True)
class ChapSessionCredentials:
    in_user: str
    in_password: str
    out_user: str
    out_password: str

    def __repr__(self) -> str:
        return f"ChapSessionCredentials(in_user={self.in_user!r}, out_user={self.out_user!r})"


def _read_properties(path: Path) -> configparser.SectionProxy:
    parser = configparser.ConfigParser(
        delimiters=("=", ":"),
        comment_prefixes=("#", "!"),
        interpolation=None,
    )
    parser.optionxform = str  # keys are case sensitive
    text = path.read_text(encoding="utf-8")
    parser.read_string(f"[{_SECTION}]\n{text}", source=str(path))
    return parser[_SECTION]


def load_chap_credentials(path: Union[str, Path]) -> ChapSessionCredentials:
    """
    Load session CHAP credentials from ``path``.

    The file is read on every call; nothing is cached.

    Raises:
        ChapCredentialsError: File cannot be read or parsed, or a key is missing
    """
    path = Path(path)
    try:
        section = _read_properties(path)
    except (OSError, configparser.Error) as e:
        raise ChapCredentialsError(f"Failed to load chap credentials from {path}: {e}")

    missing = [
        key
        for key in (IN_USER_KEY, IN_PASSWORD_KEY, OUT_USER_KEY, OUT_PASSWORD_KEY)
        if key not in section
    ]
    if missing:
        raise ChapCredentialsError(
            f"Failed to decode chap credentials from {path}: missing {', '.join(missing)}"
        )

    return ChapSessionCredentials(
        in_user=section[IN_USER_KEY].strip(),
        in_password=section[IN_PASSWORD_KEY].strip(),
        out_user=section[OUT_USER_KEY].strip(),
        out_password=section[OUT_PASSWORD_KEY].strip(),
    )
