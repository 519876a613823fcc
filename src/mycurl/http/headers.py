"""src/mycurl/http/headers.py

HTTP header container for mycurl.
"""

from typing import (
    Any,
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Tuple,
    Union,
    cast,
)

HeaderSource = Union[Mapping[str, Union[str, List[str]]], Iterable[Tuple[str, str]]]


class Headers(Mapping[str, str]):
    """
    Case-insensitive mapping of HTTP headers with support for multiple values.

    Duplicate headers are joined by commas, except Set-Cookie, which
    returns its first value. Access raw lists via get_all().
    """

    __slots__ = ("_headers",)

    def __init__(self, headers: Optional[HeaderSource] = None):
        self._headers: Dict[str, List[str]] = {}
        if not headers:
            return

        if isinstance(headers, Mapping):
            for k, v in headers.items():
                if isinstance(v, list):
                    self._headers.setdefault(k.lower(), []).extend(v)
                else:
                    self._headers.setdefault(k.lower(), []).append(v)
        else:
            for k, v in headers:
                self._headers.setdefault(k.lower(), []).append(v)

    def __getitem__(self, key: str) -> str:
        """Get header value (comma-joined if multiple, except Set-Cookie)."""
        value = self.get(key)
        if value is None:
            raise KeyError(key)
        return cast(str, value)

    def __iter__(self) -> Iterator[str]:
        return iter(self._headers)

    def __len__(self) -> int:
        return len(self._headers)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._headers

    def __repr__(self) -> str:
        return f"Headers({self._headers!r})"

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get header value.

        Args:
            key: Header name (case-insensitive).
            default: Default value if header not found.

        Returns:
            Comma-joined string for multiple values (except Set-Cookie
            which returns first), or default if not found.
        """
        values = self._headers.get(key.lower())
        if not values:
            return default

        if key.lower() == "set-cookie":
            return values[0]

        return ", ".join(values)

    def get_all(self, key: str) -> List[str]:
        """
        Get all values of a header.

        Args:
            key: Header name (case-insensitive).

        Returns:
            List of all values for the header, empty list if not found.
        """
        return list(self._headers.get(key.lower(), []))

    def to_dict(self) -> Dict[str, List[str]]:
        """Lower-cased names mapped to every value, for serialization."""
        return {k: list(v) for k, v in self._headers.items()}
