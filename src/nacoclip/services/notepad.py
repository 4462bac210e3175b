from nacoclip.services.persistence import NOTEPAD_KEY, PersistenceLayer


class Notepad:
    """Free-form note text kept in its own storage slot."""

    def __init__(self, persistence: PersistenceLayer) -> None:
        self._persistence = persistence
        value = persistence.load(NOTEPAD_KEY, "")
        self._text = value if isinstance(value, str) else ""

    @property
    def text(self) -> str:
        return self._text

    def save(self, text: str) -> None:
        self._persistence.save(NOTEPAD_KEY, text)
        self._text = text

    def clear(self) -> None:
        self.save("")
