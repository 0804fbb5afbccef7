from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True, slots=True)
class CheckLine:
    label: str
    status: str
    detail: Optional[str] = None

    def render(self) -> str:
        if self.detail:
            return f"{self.label}: {self.status} ({self.detail})"
        return f"{self.label}: {self.status}"


@dataclass(slots=True)
class CheckReport:
    ok: bool = True
    lines: list[CheckLine] = field(default_factory=list)

    def passed(self, label: str, detail: Optional[str] = None) -> None:
        self.lines.append(CheckLine(label, "OK", detail))

    def warn(self, label: str, detail: Optional[str] = None) -> None:
        self.lines.append(CheckLine(label, "WARNING", detail))

    def fail(self, label: str, detail: Optional[str] = None) -> None:
        self.ok = False
        self.lines.append(CheckLine(label, "ERROR", detail))

    def skip(self, label: str, detail: Optional[str] = None) -> None:
        self.lines.append(CheckLine(label, "SKIPPED", detail))

    @property
    def checks(self) -> list[str]:
        return [line.render() for line in self.lines]
