"""
mqttopts Exception Hierarchy

Errors raised while building or mutating MQTT server options:
rejected setter arguments, inconsistent records and writes to
frozen options.
"""


class OptionsError(Exception):
    """Base exception for all options errors."""
    __slots__ = ('message',)

    def __init__(self, message):
        self.message = message
        super().__init__(message)


class InvalidArgument(OptionsError, ValueError):
    """A setter argument violates a precondition or the buffer/message size rule."""
    __slots__ = ('field', 'value')

    def __init__(self, message, field=None, value=None):
        super().__init__(message)
        self.field = field
        self.value = value


class ConfigurationError(OptionsError):
    """A record or keyword overlay produced an unusable configuration.

    ``fields`` and ``values`` are parallel tuples. A cross-field conflict
    names both fields; a single bad key names only that key.
    """
    __slots__ = ('fields', 'values')

    def __init__(self, message, fields=(), values=()):
        super().__init__(message)
        self.fields = tuple(fields)
        self.values = tuple(values)


class FrozenOptionsError(OptionsError):
    """Mutation attempted after freeze()."""
    __slots__ = ()

    def __init__(self, message):
        super().__init__(message)
