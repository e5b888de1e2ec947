"""
Standard exit codes for autodoc commands.

Following Unix/POSIX conventions for command-line tools.
"""

# Standard POSIX exit codes
GENERAL_ERROR = 1        # General errors

# Application-specific exit codes (64-113 are typically available)
NOT_A_GIT_REPO = 64      # Target path is not inside a git work tree
CONFIG_ERROR = 66        # Configuration file or option error
CANT_CREATE = 73         # Temporary directory could not be created
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)

# Exit code mappings for common exceptions
EXCEPTION_EXIT_CODES = {
    'FileNotFoundError': GENERAL_ERROR,
    'PermissionError': GENERAL_ERROR,
    'ConfigError': CONFIG_ERROR,
    'KeyboardInterrupt': INTERRUPTED,
}


def get_exit_code_for_exception(exc: BaseException) -> int:
    """
    Get the appropriate exit code for an exception.

    CommandError subclasses carry their own code; anything else is
    looked up by class name.

    Args:
        exc: The exception that occurred

    Returns:
        Appropriate exit code
    """
    if isinstance(exc, CommandError):
        return exc.exit_code
    exc_name = exc.__class__.__name__
    return EXCEPTION_EXIT_CODES.get(exc_name, GENERAL_ERROR)


class CommandError(Exception):
    """
    Exception that commands can raise to indicate specific exit codes.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class ConfigError(CommandError):
    """Raised when there's a configuration error."""
    def __init__(self, message: str):
        super().__init__(message, CONFIG_ERROR)


class NotAGitRepoError(CommandError):
    """Raised when the target path is not a git work tree."""
    def __init__(self, path: str):
        super().__init__(f"Not a git repository: {path}", NOT_A_GIT_REPO)
        self.path = path


class DirtyIndexError(CommandError):
    """Raised when the index has staged changes."""
    def __init__(self, message: str = (
        "Git index isn't clean. Make sure you have no staged changes. "
        "(try 'git reset .')"
    )):
        super().__init__(message, GENERAL_ERROR)


class MissingDocCommandError(CommandError):
    """Raised when no documentation command is configured."""
    def __init__(self, message: str = "Please specify a DOC_CMD, e.g. lein codox"):
        super().__init__(message, GENERAL_ERROR)


class DocCommandError(CommandError):
    """Raised when the documentation command exits non-zero.

    The exit code is the documentation command's own status.
    """
    def __init__(self, command: str, returncode: int):
        super().__init__(
            f"The command '{command}' failed with exit status {returncode}",
            returncode if returncode > 0 else GENERAL_ERROR,
        )
        self.command = command
        self.returncode = returncode


class EmptyOutputError(CommandError):
    """Raised when the documentation command produced no output."""
    def __init__(self, command: str, output_dir: str):
        super().__init__(
            f"The command '{command}' created no output in '{output_dir}', giving up",
            GENERAL_ERROR,
        )
        self.command = command
        self.output_dir = output_dir


class TempDirError(CommandError):
    """Raised when the temporary index directory cannot be created."""
    def __init__(self, reason: str):
        super().__init__(f"Could not create temporary directory: {reason}", CANT_CREATE)


class GitCommandError(CommandError):
    """Raised when a git command exits non-zero."""
    def __init__(self, args, returncode: int, stderr: str = ""):
        cmd_str = ' '.join(args)
        message = f"Command failed with exit code {returncode}: {cmd_str}"
        if stderr:
            message += f"\n{stderr.strip()}"
        super().__init__(message, returncode if returncode > 0 else GENERAL_ERROR)
        self.args_list = list(args)
        self.returncode = returncode
        self.stderr = stderr
