"""
Locale definitions for money formatting and parsing.

Grouping patterns are applied from the rightmost integer digit moving left
and the last entry repeats. The Indian pattern ``(3, 2, 2)`` renders
``12345678`` as ``1,23,45,678``; the western pattern ``(3, 3, 3)`` renders
it as ``12,345,678``.
"""

from dataclasses import dataclass
from enum import Enum

from money_kernel.exceptions import UnsupportedLocaleError


@dataclass(frozen=True, slots=True)
class LocalFormat:
    """Separators and grouping for one locale."""

    group_separator: str
    decimal_separator: str
    grouping: tuple[int, ...]

    @property
    def repeat_group(self) -> int:
        """Group size used once the explicit pattern is exhausted."""
        return self.grouping[-1] if self.grouping else 3

    def group_size(self, index: int) -> int:
        """Expected size of the ``index``-th group counted from the right."""
        if index < len(self.grouping):
            return self.grouping[index]
        return self.repeat_group


class Locale(str, Enum):
    """Supported formatting locales."""

    EN_US = "en-US"  # 1,234,567.89
    EN_IN = "en-IN"  # 12,34,567.89
    EN_EU = "en-EU"  # 1.234.567,89
    EN_BY = "en-BY"  # 1 234 567,89

    def spec(self) -> LocalFormat:
        return _LOCALE_FORMATS[self]

    @classmethod
    def parse(cls, value: "str | Locale") -> "Locale":
        """
        Resolve a locale tag such as ``"en-US"`` or ``"en_us"``.

        Raises:
            UnsupportedLocaleError: If the tag names no supported locale.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise UnsupportedLocaleError(value)
        wanted = value.strip().replace("_", "-").lower()
        for locale in cls:
            if locale.value.lower() == wanted:
                return locale
        raise UnsupportedLocaleError(value)

    def __str__(self) -> str:
        return self.value


_LOCALE_FORMATS: dict[Locale, LocalFormat] = {
    Locale.EN_US: LocalFormat(",", ".", (3, 3, 3)),
    Locale.EN_IN: LocalFormat(",", ".", (3, 2, 2)),
    Locale.EN_EU: LocalFormat(".", ",", (3, 3, 3)),
    Locale.EN_BY: LocalFormat(" ", ",", (3, 3, 3)),
}
