"""Protocol for payloads that know how to display themselves."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class Renderable(Protocol):
    """Payload with its own display form.

    The renderer calls ``to_display_string()`` instead of dumping the
    object's structure. Implementations must not raise.
    """

    def to_display_string(self) -> str:
        """Return the text shown after the level name."""
        ...
