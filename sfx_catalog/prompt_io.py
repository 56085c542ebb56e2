"""
Terminal I/O seam for the interactive browse commands.

The age gate asks a single yes/no question before showing mature results;
``ask_yes_no`` turns the answer into affirm (True), decline (False) or
dismiss (None, for a blank answer or closed input). ``BufferPromptIO``
replays scripted answers in tests and raises EOFError once they run out,
which the gate treats as a dismissal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Protocol


class PromptIO(Protocol):
    def print(self, text: str = "") -> None: ...

    def input(self, prompt: str = "") -> str: ...


class ConsolePromptIO:
    def print(self, text: str = "") -> None:
        print(text)

    def input(self, prompt: str = "") -> str:
        return input(prompt)


@dataclass(slots=True)
class BufferPromptIO:
    inputs: List[str] = field(default_factory=list)
    outputs: List[str] = field(default_factory=list)
    prompts: List[str] = field(default_factory=list)

    def print(self, text: str = "") -> None:
        self.outputs.append(text)

    def input(self, prompt: str = "") -> str:
        self.prompts.append(prompt)
        if not self.inputs:
            raise EOFError("BufferPromptIO has no more inputs")
        return self.inputs.pop(0)


def ask_yes_no(io: PromptIO, prompt: str) -> Optional[bool]:
    """Ask until the answer is yes/no; blank input or EOF means no answer (None)."""
    while True:
        try:
            answer = io.input(prompt).strip().lower()
        except EOFError:
            return None
        if not answer:
            return None
        if answer in {"y", "yes"}:
            return True
        if answer in {"n", "no"}:
            return False
        io.print("Please answer y or n.")
