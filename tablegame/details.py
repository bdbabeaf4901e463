"""
Details (scoreboard) - named display values mirrored to an external sink.

Details are a namespace separate from globals: every write is pushed to
the sink so the scoreboard always shows the stored value.
"""

from typing import Any, Dict, List, Mapping, Optional, Protocol, Tuple, Union, runtime_checkable


@runtime_checkable
class DetailsSink(Protocol):
    """Where scoreboard values are displayed."""

    def update(self, name: str, value: Any) -> None:
        ...

    def show(self) -> None:
        ...

    def hide(self) -> None:
        ...


class NullDetailsSink:
    """No-op sink when there is no scoreboard display."""

    def update(self, name: str, value: Any) -> None:
        pass

    def show(self) -> None:
        pass

    def hide(self) -> None:
        pass


class MemoryDetailsSink:
    """Sink that records what it was asked to display."""

    def __init__(self):
        self.values: Dict[str, Any] = {}
        self.updates: List[Tuple[str, Any]] = []
        self.visible = True

    def update(self, name: str, value: Any) -> None:
        self.values[name] = value
        self.updates.append((name, value))

    def show(self) -> None:
        self.visible = True

    def hide(self) -> None:
        self.visible = False


class Scoreboard:
    """Stored detail values plus the sink that displays them."""

    def __init__(self, initial: Optional[Mapping[str, Any]] = None,
                 sink: Optional[DetailsSink] = None):
        self._sink = sink or NullDetailsSink()
        self._values: Dict[str, Any] = {}
        self.visible = True
        for name, value in (initial or {}).items():
            self.set(name, value)

    def get(self, name: Optional[str] = None) -> Any:
        """One detail value (None if unknown), or a copy of all of them."""
        if name is None:
            return dict(self._values)
        return self._values.get(name)

    def set(self, name_or_values: Union[str, Mapping[str, Any]], value: Any = None) -> None:
        """Set one detail, or several from a mapping, updating the sink."""
        if isinstance(name_or_values, Mapping):
            items = list(name_or_values.items())
        else:
            items = [(name_or_values, value)]
        for name, val in items:
            self._values[name] = val
            self._sink.update(name, val)

    def show(self) -> None:
        self.visible = True
        self._sink.show()

    def hide(self) -> None:
        self.visible = False
        self._sink.hide()

    def text(self) -> str:
        """Single-line rendering, e.g. 'Score: 100  Lives: 3'."""
        return "  ".join(f"{name}: {value}" for name, value in self._values.items())

    def __contains__(self, name: str) -> bool:
        return name in self._values
