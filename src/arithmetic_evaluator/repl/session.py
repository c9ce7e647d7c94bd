"""Interactive read-evaluate-print loop."""
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict, Field
from rich.console import Console
from rich.style import Style
from rich.text import Text

from arithmetic_evaluator.common.calculator import Calculator
from arithmetic_evaluator.common.errors import UnrecognizedCommand
from arithmetic_evaluator.common.formatting import format_error, format_number
from arithmetic_evaluator.common.logger import logger
from arithmetic_evaluator.common.spans import Span

PROMPT_STYLE = Style(color="green", bold=True)

# Lines starting with this character are session commands, not expressions
COMMAND_PREFIX: str = "?"


class ReplSession(BaseModel):
    """
    Prompt for expressions until the user quits or input ends.

    Each line is evaluated independently; nothing carries over from one line to the next.
    """

    # Allow arbitrary types like rich.console.Console
    model_config = ConfigDict(arbitrary_types_allowed=True)

    prompt: str = Field(default="calc❯ ", description="Text shown before each input line")
    quit_command: str = Field(default="?quit", min_length=1, description="Line that ends the session")
    console: Console = Field(default_factory=Console, description="Console used for prompts and output")

    def handle_line(self, line: str) -> bool:
        """
        Evaluate one input line and print its result or error.

        :param str line: Raw line as entered by the user

        :return: False when the session should end, True otherwise
        :rtype: bool
        """
        command = line.strip()
        if command == self.quit_command:
            return False
        if not command:
            # Blank lines are not worth an EmptyInput error
            return True
        if command.startswith(COMMAND_PREFIX):
            self._report_unknown_command(line)
            return True

        outcome = Calculator.run(line)
        if outcome.ok:
            self.console.print(format_number(outcome.result), highlight=False)
        else:
            self.console.print(format_error(outcome.error, line))
        return True

    def _report_unknown_command(self, line: str) -> None:
        """Print an error underlining the first word of a command line that is not the quit command."""
        start = len(line) - len(line.lstrip())
        word = line[start:].split(maxsplit=1)[0]
        error = UnrecognizedCommand(
            f"expected `{self.quit_command}`, found `{word}`", Span(start=start, end=start + len(word))
        )
        logger.debug("Unrecognized command %r", word)
        self.console.print(format_error(error.to_report(), line))

    def run(self, read_line: Optional[Callable[[Text], str]] = None) -> None:
        """
        Run the loop until the quit command, end of input or an interrupt.

        :param read_line: Function reading one line after showing the prompt, defaults to ``console.input``
        """
        read_line = read_line or self.console.input
        logger.debug("Starting interactive session")
        while True:
            try:
                line = read_line(Text(self.prompt, style=PROMPT_STYLE))
            except (EOFError, KeyboardInterrupt):
                self.console.print()
                break
            if not self.handle_line(line):
                break
        logger.debug("Interactive session ended")
