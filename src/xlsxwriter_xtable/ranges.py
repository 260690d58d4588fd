from typing import Optional, Union

from attr import attrs


@attrs(auto_attribs=True, frozen=True)
class Empty(object):
    """No range is being tracked."""

    def start(self, coords: str) -> 'Open':
        return Open(coords)

    def end(self, coords: str) -> 'Open':
        # Closing a range that was never opened opens it instead
        return self.start(coords)


@attrs(auto_attribs=True, frozen=True)
class Open(object):
    """A range whose top left corner is known."""
    start_coords: str

    def start(self, coords: str) -> 'Open':
        return Open(coords)

    def end(self, coords: str) -> 'Closed':
        return Closed(self.start_coords, coords)


@attrs(auto_attribs=True, frozen=True)
class Closed(object):
    """A range with both corners known, ready to receive options."""
    start_coords: str
    end_coords: str

    def start(self, coords: str) -> 'Open':
        return Open(coords)

    def end(self, coords: str) -> 'Closed':
        return Closed(self.start_coords, coords)

    @property
    def address(self) -> str:
        return f'{self.start_coords}:{self.end_coords}'


RangeState = Union[Empty, Open, Closed]


class RangeTracker(object):
    """Accumulates a rectangular range across successive cursor positions.

    States go ``Empty -> Open -> Closed -> (consumed) -> Empty``. `start` is always legal, `end` on an
    empty tracker opens the range instead of closing it.
    """

    def __init__(self):
        self.state: RangeState = Empty()

    def start(self, coords: str):
        self.state = self.state.start(coords)

    def end(self, coords: str):
        self.state = self.state.end(coords)

    def reset(self):
        self.state = Empty()

    def consume(self) -> Optional[str]:
        """Return the address of the closed range and forget it, or None if the range is not closed."""
        if not isinstance(self.state, Closed):
            return None

        address = self.state.address
        self.reset()
        return address

    @property
    def is_opened(self) -> bool:
        return not isinstance(self.state, Empty)

    @property
    def is_closed(self) -> bool:
        return isinstance(self.state, Closed)
