from typing import Literal, Optional
from pydantic import BaseModel

Verb = Literal["get", "set"]


class StatEntry(BaseModel):
    reads: int = 0
    writes: int = 0


class Command(BaseModel):
    verb: Verb
    key: str
    value: Optional[str] = None  # only for set


class CommandResult(BaseModel):
    verb: Verb
    key: str
    value: str
    reads: int
    writes: int

    def line(self) -> str:
        return f"{self.key}={self.value} (reads={self.reads}, writes={self.writes})"

    def render(self) -> str:
        if self.verb == "set":
            return f"<span style='background:#fdd'>SET {self.line()}</span>"
        return self.line()
