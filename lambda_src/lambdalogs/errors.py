# errors.py


class LambdaLogsError(Exception):
    pass


class ConfigurationError(LambdaLogsError):
    pass


# Also a builtin ConnectionError so generic network handling still catches it.
class StoreConnectionError(LambdaLogsError, ConnectionError):
    pass


class NotInitializedError(LambdaLogsError):
    pass


class DiagnosticError(LambdaLogsError):
    pass


class CommandExecutionError(DiagnosticError):
    pass


class InvalidOutputError(DiagnosticError):
    pass


class PersistenceError(LambdaLogsError):
    pass


class DeadlineExceededError(LambdaLogsError):
    pass


GENERIC_ERROR_MESSAGE = "An internal error occurred"
