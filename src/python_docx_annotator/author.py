"""
Author identity stamped on comments and tracked changes.

The author is injected configuration: a Document receives either a plain name
or an AuthorIdentity and every record it writes carries that identity.
"""

from dataclasses import dataclass

from .constants import DEFAULT_AUTHOR


@dataclass(frozen=True)
class AuthorIdentity:
    """Identity recorded on comments and revisions.

    Attributes:
        author: Display name (e.g., "Hancock, Parker" or "Review Bot")
        initials: Initials shown in comment balloons; derived from the name
            when left empty
        email: Optional email address, informational only

    Example:
        >>> identity = AuthorIdentity("Jane Smith")
        >>> identity.initials
        'JS'
    """

    author: str = DEFAULT_AUTHOR
    initials: str = ""
    email: str = ""

    def __post_init__(self) -> None:
        """Validate author identity fields."""
        if not self.author or not self.author.strip():
            raise ValueError("Author name cannot be empty")
        if self.email and "@" not in self.email:
            raise ValueError(f"Invalid email format: {self.email}")
        if not self.initials:
            object.__setattr__(self, "initials", initials_for(self.author))

    @property
    def display_name(self) -> str:
        """Get the display name for the author."""
        return self.author

    @classmethod
    def coerce(cls, value: "str | AuthorIdentity | None") -> "AuthorIdentity":
        """Build an identity from a name, an identity, or None (default author)."""
        if value is None:
            return cls()
        if isinstance(value, AuthorIdentity):
            return value
        return cls(author=value)

    def __str__(self) -> str:
        if self.email:
            return f"{self.author} <{self.email}>"
        return self.author


def initials_for(name: str) -> str:
    """Initials of each whitespace-separated word of a name.

    Example:
        >>> initials_for("Word Document Modifier")
        'WDM'
    """
    return "".join(word[0].upper() for word in name.split() if word)
