import logging
from datetime import datetime, timezone

from minftp.levenstein import COMMANDS, get_suggestion

from .session import Session

logger = logging.getLogger(__name__)

MAX_COMMAND_LENGTH = 256


class OperatorCommand:
    """One line typed by the operator: a verb and an optional argument."""

    def __init__(self, raw_command: str):
        self.raw_command = raw_command.strip()
        parts = self.raw_command.split(' ', 1)
        self.name = parts[0].lower()
        self.argument = parts[1] if len(parts) > 1 else ""

    def __str__(self):
        return f"OperatorCommand(name='{self.name}', argument='{self.argument}')"


class ClientCommandHandler:
    """
    Maps operator commands onto Session calls and keeps a history of them.

    get/put/dir/list/cd/pwd/quit have dedicated handlers; any other verb is
    uppercased and sent verbatim, followed by a single reply read.
    """

    def __init__(self, session: Session, output=print):
        self.session = session
        self.output = output
        # history as list of dicts: {"time":..., "command":..., "response":..., "error":bool}
        self.history = []
        self.handlers = {
            "quit": self._quit,
            "get": self._get,
            "put": self._put,
            "dir": self._list,
            "list": self._list,
            "cd": self._cd,
            "pwd": self._pwd,
        }

    def dispatch(self, line: str) -> bool:
        """
        Run one operator line. Returns False once the session has been quit,
        True otherwise.
        """
        line = line.strip()
        if not line:
            return True
        if len(line) > MAX_COMMAND_LENGTH:
            self.output(f"Command too long. Limit input to {MAX_COMMAND_LENGTH} characters.")
            return True

        command = OperatorCommand(line)
        handler = self.handlers.get(command.name, self._passthrough)
        logger.debug(f"Dispatching {command}")
        result = handler(command)

        self.history.append({
            "time": datetime.now(timezone.utc),
            "command": line,
            "response": result,
            "error": result is None,
        })
        return command.name != "quit"

    def _quit(self, command: OperatorCommand):
        return self.session.quit()

    def _get(self, command: OperatorCommand):
        return self.session.retrieve_file(command.argument)

    def _put(self, command: OperatorCommand):
        return self.session.upload_file(command.argument)

    def _list(self, command: OperatorCommand):
        return self.session.list_directory()

    def _cd(self, command: OperatorCommand):
        return self.session.change_directory(command.argument)

    def _pwd(self, command: OperatorCommand):
        return self.session.print_working_directory()

    def _passthrough(self, command: OperatorCommand):
        verb = command.name.upper()
        if verb not in COMMANDS:
            suggestion = get_suggestion(verb)
            if suggestion:
                logger.info(f"Unknown verb {verb}, suggesting {suggestion}")
                self.output(f"{verb} is not a standard FTP command. Try with {suggestion}")
        # Only the verb is sent, exactly as typed apart from case.
        self.session.send_command(verb)
        response = self.session.read_response()
        if response is not None:
            self.output(response.rstrip())
        return response

    # Helpers for front ends
    def get_history(self):
        """Return a copy of the history list."""
        return list(self.history)

    def clear_history(self):
        self.history.clear()
