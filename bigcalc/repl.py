# repl.py

"""
Interactive shell around the evaluator.

Uses prompt_toolkit for line editing and a persistent history file. Errors
are printed for the offending line only; the session keeps going.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from prompt_toolkit import PromptSession, print_formatted_text
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.history import FileHistory

from .compiler import disassemble
from .config import Settings, lift_int_digit_limit
from .errors import EvalError
from .evaluator import Calculator
from .lexer import format_tokens, tokenize

logger = logging.getLogger(__name__)

PROMPT = '>> '

BANNER = "Arbitrary-precision integer calculator. Type :help for help. Ctrl-D or :exit to quit."

HISTORY_LINES = 20

_HELP_TOPICS: Dict[str, str] = {
    'general': (
        "Calculator help:\n"
        "Evaluates integer expressions exactly, with no limit on the size of numbers.\n"
        "Examples:\n"
        "  (1 + 2) * 3      -> 9\n"
        "  2 ^ 100          -> 1267650600228229401496703205376\n"
        "  10 - 3 - 2       -> 9   (operators group to the right, see 'help operators')\n"
        "Commands:\n"
        "  :help, help [topic]    show help (topics: operators)\n"
        "  :tokens <expr>         show the tokens of an expression\n"
        "  :code <expr>           show the compiled instructions of an expression\n"
        "  :history               show recent input\n"
        "  :exit, exit            exit\n"
    ),
    'operators': (
        "Operators (high -> low precedence):\n"
        "  ^          exponentiation\n"
        "  * / %      multiplication, floor division, modulo\n"
        "  + -        addition, subtraction\n"
        "  ( )        grouping\n"
        "Notes:\n"
        "  - Every operator groups to the right: 10 - 3 - 2 == 10 - (3 - 2) == 9,\n"
        "    and 64 / 8 / 2 == 64 / (8 / 2) == 16. Use parentheses for the other reading.\n"
        "  - '/' rounds toward negative infinity; '%' takes the sign of the divisor.\n"
        "  - There is no unary minus: write 0 - 5 for -5.\n"
        "  - Exponents must be between 0 and 2^64 - 1.\n"
    ),
}


def show_help(topic: Optional[str] = None) -> str:
    """Return help text for topic or general if None."""
    if not topic:
        return _HELP_TOPICS['general']
    key = topic.lower()
    return _HELP_TOPICS.get(key, f"No help available for topic '{topic}'")


def format_error(error: EvalError) -> str:
    return f"[{error.kind}] {error}"


class REPL:
    """Read-Eval-Print Loop for the calculator."""

    def __init__(self, settings: Optional[Settings] = None, session: Optional[Any] = None):
        self.settings = settings or Settings()
        self.calculator = Calculator(self.settings)
        self.history_file = self.settings.history_file
        self.color = self.settings.color
        # Created on first use so that constructing a REPL needs no terminal.
        self.session = session
        self.last_error: Optional[EvalError] = None
        lift_int_digit_limit()

    def _get_session(self) -> Any:
        if self.session is None:
            self.session = PromptSession(history=FileHistory(self.history_file))
        return self.session

    def _process_command(self, line: str) -> Optional[str]:
        """Process commands starting with ':' or 'help'. Returns response string if a command, else None."""
        s = line.strip()
        if not s:
            return None
        if s.startswith(':'):
            body = s[1:].lstrip()
            if body == '':
                return "No command specified. Use :help for available commands."
            parts = body.split(None, 1)
            cmd = parts[0]
            rest = parts[1] if len(parts) > 1 else ''
            return self._run_command(cmd, rest)
        lowered = s.lower()
        if lowered in {'exit', 'quit'}:
            raise EOFError()
        parts = s.split(None, 1)
        if parts[0].lower() == 'help':
            return show_help(parts[1].strip() if len(parts) > 1 else None)
        return None

    def _run_command(self, cmd: str, rest: str) -> str:
        """Execute a colon command. Raises EOFError for exit/quit."""
        cmd_lower = cmd.lower()
        if cmd_lower in {'exit', 'quit'}:
            raise EOFError()
        if cmd_lower == 'help':
            return show_help(rest.strip() or None)
        if cmd_lower == 'tokens':
            if not rest.strip():
                return "Usage: :tokens <expression>"
            return format_tokens(tokenize(rest))
        if cmd_lower == 'code':
            if not rest.strip():
                return "Usage: :code <expression>"
            return disassemble(self.calculator.compile(rest))
        if cmd_lower == 'history':
            return self._recent_history()
        return f"Unknown command: {cmd}"

    def _recent_history(self) -> str:
        try:
            strings = list(FileHistory(self.history_file).load_history_strings())
        except OSError as e:
            return f"Could not read history: {e}"
        if not strings:
            return "(no history)"
        # load_history_strings yields newest first.
        recent: List[str] = strings[:HISTORY_LINES]
        return "\n".join(reversed(recent))

    def evaluate_line(self, line: str) -> Tuple[bool, str]:
        """
        Evaluate a single line (either command or expression). Returns (ok, output).

        EOFError is propagated when the line asks to exit.
        """
        self.last_error = None
        try:
            cmd_out = self._process_command(line)
            if cmd_out is not None:
                return True, cmd_out
            return True, str(self.calculator.evaluate(line))
        except EvalError as e:
            logger.debug(f"Evaluation of {line!r} failed: {format_error(e)}")
            self.last_error = e
            return False, format_error(e)

    def _show(self, ok: bool, out: str) -> None:
        if not ok and self.color and self.last_error is not None:
            print_formatted_text(FormattedText([
                ('ansired bold', f"[{self.last_error.kind}]"),
                ('', f" {self.last_error}"),
            ]))
        else:
            print(out)

    def repl_loop(self) -> None:
        """Interactive loop; Ctrl-C cancels the current line, Ctrl-D or :exit leaves."""
        print(BANNER)
        session = self._get_session()
        while True:
            try:
                line = session.prompt(PROMPT)
            except KeyboardInterrupt:
                print("^C")
                continue
            except EOFError:
                print()
                break
            if not line.strip():
                continue
            try:
                ok, out = self.evaluate_line(line)
            except EOFError:
                print("Goodbye!")
                break
            self._show(ok, out)
