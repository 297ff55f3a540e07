"""Terminal layout for focus-anchored tokens."""

from __future__ import annotations

from dataclasses import dataclass

# Half the expected longest token; tokens longer than twice this drift right.
DEFAULT_FOCUS_COLUMN = 20
BASE_COLOR = "\x1b[0m"
RESET_COLOR = "\x1b[0m"


@dataclass(frozen=True)
class TokenSegments:
    """A token split around its focus character."""

    left: str
    center: str
    right: str

    @property
    def text(self) -> str:
        return self.left + self.center + self.right


def center_offset(token: str) -> int:
    """Return the index of the focus character."""
    return len(token) // 2


def leading_spaces(token_length: int, target_column: int) -> int:
    """Return the padding that puts the focus character on target_column."""
    return max(0, target_column - token_length // 2)


def split_token(token: str) -> TokenSegments:
    """Split a token into the text before, at and after its focus character."""
    if not token:
        raise ValueError("cannot split an empty token")
    middle = center_offset(token)
    return TokenSegments(
        left=token[:middle],
        center=token[middle],
        right=token[middle + 1 :],
    )


def render_line(token: str, color_code: str, focus_column: int) -> str:
    """Build the terminal line for a token with its focus character colored."""
    segments = split_token(token)
    padding = " " * leading_spaces(len(token), focus_column)
    return (
        f"{padding}{BASE_COLOR}{segments.left}"
        f"{color_code}{segments.center}{RESET_COLOR}"
        f"{BASE_COLOR}{segments.right}{RESET_COLOR}"
    )
