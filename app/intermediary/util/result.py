"""Outcome of a validation or load step that should not raise."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Result:
    """Truthy on success; unpacks to ``(success, message)``.

    ``value`` carries the loaded object on success. ``problems`` lists
    every individual finding on failure so callers can show all of them
    at once instead of only the first.

    Examples::

        r = check_prompt(path)
        if not r:
            for problem in r.problems:
                print(problem)

        ok, msg = check_prompt(path)
    """

    success: bool
    message: str = ""
    value: Any = field(default=None, repr=False)
    problems: tuple[str, ...] = ()

    @classmethod
    def ok(cls, message: str = "", *, value: Any = None) -> Result:
        return cls(success=True, message=message, value=value)

    @classmethod
    def fail(cls, message: str = "", *, problems: tuple[str, ...] | list[str] = ()) -> Result:
        return cls(success=False, message=message, problems=tuple(problems) or (message,))

    def __bool__(self) -> bool:
        return self.success

    def __iter__(self):
        yield self.success
        yield self.message

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "status": "ok" if self.success else "error",
            "message": self.message,
        }
        if not self.success:
            data["problems"] = list(self.problems)
        return data
