"""LCARS terminal: a small command interpreter with Trek easter eggs."""

from __future__ import annotations

import ast
import logging
import operator
import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable

from lcars.nlp.composer import stardate
from lcars.nlp.phrases import CAPTAIN_QUOTES, FORTUNES, JOKES, REDSHIRT_FATES, pick

logger = logging.getLogger("lcars.terminal")

HELP_TEXT = [
    ("Available Commands:", "primary"),
    ("  help              - Show this help message", "foreground"),
    ("  clear             - Clear terminal", "foreground"),
    ("  status            - Show system status", "foreground"),
    ("  date              - Show current date/time", "foreground"),
    ("  stardate          - Show Star Trek stardate", "foreground"),
    ("  tasks             - List active tasks", "foreground"),
    ("  weather           - Get weather info", "foreground"),
    ("  joke              - Tell a programming joke", "foreground"),
    ("  fortune           - Get a fortune", "foreground"),
    ("  spock             - Spock quote", "foreground"),
    ("  picard            - Picard quote", "foreground"),
    ("  sisko             - Sisko quote", "foreground"),
    ("  janeway           - Janeway quote", "foreground"),
    ("  archer            - Archer quote", "foreground"),
    ("  mariner           - Mariner quote", "foreground"),
    ("  calc <expr>       - Calculate expression", "foreground"),
    ("  echo <text>       - Echo text", "foreground"),
    ("", ""),
    ("Easter Eggs:", "primary"),
    ("  redshirt          - Random redshirt fate", "foreground"),
    ("  khan              - KHAAAAN!", "foreground"),
    ("  beam              - Transporter effect", "foreground"),
    ("  cowsay <msg>      - Make a cow say something", "foreground"),
]

_BIN_OPS: dict[type, Callable[[Any, Any], Any]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
}
_UNARY_OPS: dict[type, Callable[[Any], Any]] = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}


@dataclass
class TerminalLine:
    text: str
    color: str = "foreground"


@dataclass
class TerminalResult:
    lines: list[TerminalLine] = field(default_factory=list)
    clear: bool = False

    def add(self, text: str, color: str = "foreground") -> None:
        self.lines.append(TerminalLine(text, color))

    def to_dict(self) -> dict[str, Any]:
        return {
            "clear": self.clear,
            "lines": [{"text": ln.text, "color": ln.color} for ln in self.lines],
        }


def evaluate(expr: str) -> float | int:
    """Evaluate +, -, *, / and parentheses over numbers. Raises ValueError otherwise."""
    try:
        tree = ast.parse(expr, mode="eval")
    except SyntaxError as exc:
        raise ValueError(f"Invalid expression: {expr!r}") from exc

    def _eval(node: ast.AST) -> float | int:
        if isinstance(node, ast.Expression):
            return _eval(node.body)
        if isinstance(node, ast.Constant) and type(node.value) in (int, float):
            return node.value
        if isinstance(node, ast.BinOp) and type(node.op) in _BIN_OPS:
            return _BIN_OPS[type(node.op)](_eval(node.left), _eval(node.right))
        if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPS:
            return _UNARY_OPS[type(node.op)](_eval(node.operand))
        raise ValueError(f"Unsupported expression: {expr!r}")

    try:
        return _eval(tree)
    except ZeroDivisionError as exc:
        raise ValueError("Division by zero") from exc


def cowsay(message: str) -> list[str]:
    message = message or "Moo!"
    return [
        " " + "_" * (len(message) + 2),
        "< " + message + " >",
        " " + "-" * (len(message) + 2),
        "        \\   ^__^",
        "         \\  (oo)\\_______",
        "            (__)\\       )\\/\\",
        "                ||----w |",
        "                ||     ||",
    ]


def run_command(
    cmd: str,
    storage: Any = None,
    *,
    rng: random.Random | None = None,
    clock: Callable[[], datetime] = datetime.now,
) -> TerminalResult:
    """Run one command on a throwaway terminal (no history)."""
    return Terminal(storage, rng=rng, clock=clock).run(cmd)


class Terminal:
    """Interprets one command line at a time.

    ``storage`` is optional; without it ``tasks`` points at the task panel.
    """

    def __init__(
        self,
        storage: Any = None,
        *,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.storage = storage
        self.rng = rng or random.Random()
        self.clock = clock
        self.history: list[str] = []

    def run(self, cmd: str) -> TerminalResult:
        result = TerminalResult()
        if not cmd or not cmd.strip():
            return result

        raw = cmd.strip()
        self.history.append(raw)
        result.add(f"> {raw}", "primary")

        command, _, rest = raw.partition(" ")
        command = command.lower()
        rest = rest.strip()
        logger.debug("terminal: %s", command)

        handler = getattr(self, f"_cmd_{command}", None)
        if command in CAPTAIN_QUOTES:
            result.add(pick(CAPTAIN_QUOTES[command], self.rng), "primary")
        elif handler is not None:
            handler(result, rest)
        else:
            result.add(f"Unknown command: '{command}'", "destructive")
            result.add("Type 'help' for available commands", "muted")

        result.add("", "")
        return result

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def _cmd_help(self, result: TerminalResult, rest: str) -> None:
        result.add("", "")
        for text, color in HELP_TEXT:
            result.add(text, color)

    def _cmd_clear(self, result: TerminalResult, rest: str) -> None:
        result.lines.clear()
        result.clear = True

    def _cmd_status(self, result: TerminalResult, rest: str) -> None:
        result.add("🖥️  LCARS SYSTEM STATUS", "primary")
        result.add("  Core Systems:    OPTIMAL", "success")
        result.add("  AI Module:       READY", "success")
        result.add("  Data Storage:    NOMINAL", "success")
        result.add("  Network:         CONNECTED", "success")

    def _cmd_date(self, result: TerminalResult, rest: str) -> None:
        result.add(self.clock().strftime("%a %b %d %Y %H:%M:%S"), "success")

    def _cmd_stardate(self, result: TerminalResult, rest: str) -> None:
        now = self.clock()
        result.add(f"⭐ Stardate: {stardate(now)}", "primary")
        result.add(f"   Earth Date: {now.strftime('%m/%d/%Y')}", "muted")

    def _cmd_tasks(self, result: TerminalResult, rest: str) -> None:
        result.add("📋 Active Tasks:", "primary")
        if self.storage is None:
            result.add("  Use /tasks page to view and manage tasks", "muted")
            return
        active = [t for t in self.storage.get_tasks() if t["status"] == "active"]
        if not active:
            result.add("  No active tasks", "muted")
        for t in active:
            result.add(f"  [{t['priority'].upper()}] {t['title']}", "foreground")

    def _cmd_weather(self, result: TerminalResult, rest: str) -> None:
        result.add("🌤️  Weather:", "primary")
        result.add("  Use /weather page for detailed weather info", "muted")

    def _cmd_joke(self, result: TerminalResult, rest: str) -> None:
        result.add(pick(JOKES, self.rng), "success")

    def _cmd_fortune(self, result: TerminalResult, rest: str) -> None:
        result.add(pick(FORTUNES, self.rng), "success")

    def _cmd_calc(self, result: TerminalResult, rest: str) -> None:
        if not rest:
            result.add("Usage: calc <expression>", "warning")
            return
        try:
            value = evaluate(rest)
        except ValueError:
            result.add("❌ Invalid expression", "destructive")
            return
        result.add(f"🔢 {rest} = {value}", "success")

    def _cmd_echo(self, result: TerminalResult, rest: str) -> None:
        result.add(rest, "foreground")

    def _cmd_redshirt(self, result: TerminalResult, rest: str) -> None:
        result.add("🔴 Beaming down redshirt...", "destructive")
        fate = pick(REDSHIRT_FATES, self.rng)
        result.add(fate, "success" if "survived" in fate else "destructive")

    def _cmd_khan(self, result: TerminalResult, rest: str) -> None:
        result.add("", "")
        result.add("🗣️  KHAAAAAAAAAAAAAN!", "destructive")
        result.add("   KHAAAAAAAAAAAAAAN!", "destructive")
        result.add("     KHAAAAAAAAAAN!", "destructive")
        result.add("", "")
        result.add("   - Captain James T. Kirk", "muted")

    def _cmd_beam(self, result: TerminalResult, rest: str) -> None:
        result.add("⚡ Energizing...", "warning")
        for bar in ("█", "▓", "▒", "░"):
            result.add(bar * 21, "primary")
        result.add("✨ Transport complete!", "success")

    def _cmd_cowsay(self, result: TerminalResult, rest: str) -> None:
        result.add("", "")
        for line in cowsay(rest):
            result.add(line, "foreground")
