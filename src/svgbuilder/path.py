"""Fluent builder for SVG path data (the ``d`` attribute)."""
from __future__ import annotations

from typing import Optional, Sequence, Union

from .nodes import format_number

Number = Union[int, float]
Batch = Sequence[Sequence[Number]]
FirstArg = Union[Number, Batch]
# In batch form the slot after the batch carries the relative flag.
SecondArg = Union[Number, bool, None]


class PathBuilder:
    """Accumulates path commands into a single command string.

    Every drawing method takes either flat coordinates or a batch, a list of
    coordinate tuples, in which case the command letter is written once and
    the second positional argument is the relative flag::

        path = PathBuilder().move_to(100, 100).line_to([[300, 100], [200, 300]]).close()
        path.path()  # 'M100,100L300,100 200,300z'
    """

    def __init__(self) -> None:
        self._path = ""

    def __str__(self) -> str:
        return self._path

    def __repr__(self) -> str:
        return f"PathBuilder({self._path!r})"

    def reset(self) -> PathBuilder:
        self._path = ""
        return self

    def path(self) -> str:
        return self._path

    def move_to(self, x: FirstArg, y: SecondArg = None, relative: bool = False) -> PathBuilder:
        relative = _relative_flag(x, y, relative)
        return self._coords("m" if relative else "M", x, y)

    def line_to(self, x: FirstArg, y: SecondArg = None, relative: bool = False) -> PathBuilder:
        relative = _relative_flag(x, y, relative)
        return self._coords("l" if relative else "L", x, y)

    def horiz_to(self, x: Union[Number, Sequence[Number]], relative: bool = False) -> PathBuilder:
        self._path += ("h" if relative else "H") + _join_values(x)
        return self

    def vert_to(self, y: Union[Number, Sequence[Number]], relative: bool = False) -> PathBuilder:
        self._path += ("v" if relative else "V") + _join_values(y)
        return self

    def curve_c_to(
        self,
        x1: FirstArg,
        y1: SecondArg = None,
        x2: Optional[Number] = None,
        y2: Optional[Number] = None,
        x: Optional[Number] = None,
        y: Optional[Number] = None,
        relative: bool = False,
    ) -> PathBuilder:
        """Cubic Bézier: start control point, end control point, end point."""
        relative = _relative_flag(x1, y1, relative)
        return self._coords("c" if relative else "C", x1, y1, x2, y2, x, y)

    def smooth_c_to(
        self,
        x2: FirstArg,
        y2: SecondArg = None,
        x: Optional[Number] = None,
        y: Optional[Number] = None,
        relative: bool = False,
    ) -> PathBuilder:
        """Cubic Bézier whose start control point reflects the previous one."""
        relative = _relative_flag(x2, y2, relative)
        return self._coords("s" if relative else "S", x2, y2, x, y)

    def curve_q_to(
        self,
        x1: FirstArg,
        y1: SecondArg = None,
        x: Optional[Number] = None,
        y: Optional[Number] = None,
        relative: bool = False,
    ) -> PathBuilder:
        relative = _relative_flag(x1, y1, relative)
        return self._coords("q" if relative else "Q", x1, y1, x, y)

    def smooth_q_to(self, x: FirstArg, y: SecondArg = None, relative: bool = False) -> PathBuilder:
        relative = _relative_flag(x, y, relative)
        return self._coords("t" if relative else "T", x, y)

    def arc_to(
        self,
        rx: Union[Number, Sequence[Sequence[object]]],
        ry: SecondArg = None,
        x_rotate: Optional[Number] = None,
        large: bool = False,
        clockwise: bool = False,
        x: Optional[Number] = None,
        y: Optional[Number] = None,
        relative: bool = False,
    ) -> PathBuilder:
        """Elliptical arc; batch entries are ``(rx, ry, rotate, large, clockwise, x, y)``."""
        relative = _relative_flag(rx, ry, relative)
        self._path += "a" if relative else "A"
        if _is_batch(rx):
            self._path += " ".join(_arc_segment(*segment) for segment in rx)
        else:
            self._path += _arc_segment(rx, ry, x_rotate, large, clockwise, x, y)
        return self

    def close(self) -> PathBuilder:
        self._path += "z"
        return self

    def _coords(self, cmd: str, *values: object) -> PathBuilder:
        first = values[0]
        if _is_batch(first):
            self._path += cmd + " ".join(_pairs(segment) for segment in first)
        else:
            present = list(values)
            # Trailing pairs are optional; stop at the first missing x.
            for idx in range(2, len(values), 2):
                if values[idx] is None:
                    present = list(values[:idx])
                    break
            self._path += cmd + _pairs(present)
        return self


def _is_batch(value: object) -> bool:
    return isinstance(value, (list, tuple))


def _relative_flag(first: object, second: object, relative: bool) -> bool:
    return bool(second) if _is_batch(first) else bool(relative)


def _pairs(values: Sequence[object]) -> str:
    tokens = [format_number(value) for value in values]
    return " ".join(",".join(tokens[idx : idx + 2]) for idx in range(0, len(tokens), 2))


def _join_values(value: object) -> str:
    if _is_batch(value):
        return " ".join(format_number(item) for item in value)
    return format_number(value)


def _flag(value: Optional[bool]) -> str:
    return "1" if value else "0"


def _arc_segment(
    rx: object, ry: object, x_rotate: object, large: object, clockwise: object, x: object, y: object
) -> str:
    return (
        f"{format_number(rx)},{format_number(ry)} {format_number(x_rotate)} "
        f"{_flag(large)},{_flag(clockwise)} {format_number(x)},{format_number(y)}"
    )
