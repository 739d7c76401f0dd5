"""Interactive mode for the treelox interpreter. Uses cmd as backend."""

import cmd

from treelox.interpreter import Interpreter
from treelox.scanner import Scanner
from treelox.tokens import TokenType


def open_braces(source: str) -> int:
    """How many ``{`` in source are still waiting for their ``}``."""
    depth = 0
    for token in Scanner(source).scan_tokens():
        if token.kind == TokenType.LEFT_BRACE:
            depth += 1
        elif token.kind == TokenType.RIGHT_BRACE:
            depth -= 1
    return depth


class Shell(cmd.Cmd):
    """treelox interpreter shell."""
    intro = "treelox interpreter\nType 'exit' or 'quit' to leave."
    prompt = "> "
    secondary_prompt = ". "  # shown while a block is still open
    _tmp_prompt = "> "

    # Lines that are shell commands rather than treelox source
    COMMANDS = ('exit', 'quit')

    def __init__(self, interpreter: Interpreter, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.interpreter = interpreter
        self._tmp_line = ""

    def onecmd(self, line):
        # cmd would otherwise treat the first word of any source line as a command name
        if line == 'EOF' or (not self._tmp_line and line.strip() in self.COMMANDS):
            return super().onecmd(line.strip())
        if not line.strip() and not self._tmp_line:
            return self.emptyline()
        return self.default(line)

    def default(self, line):
        """Runs a line of treelox source, buffering it while braces are unbalanced."""
        source = self._tmp_line + line + "\n"
        if open_braces(source) > 0:
            self._tmp_line = source
            self.prompt = self.secondary_prompt
            return False

        self._tmp_line = ""
        self.prompt = self._tmp_prompt
        self.interpreter.reporter.reset()
        self.interpreter.run_source(source)
        return False

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return False

    def do_EOF(self, arg):
        """Exits interpreter, running any unfinished input first so its errors are shown."""
        print()
        if self._tmp_line:
            source, self._tmp_line = self._tmp_line, ""
            self.interpreter.reporter.reset()
            self.interpreter.run_source(source)
        return True

    def do_exit(self, arg):
        """Exits interpreter."""
        return True

    do_quit = do_exit
