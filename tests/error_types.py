from agla_error.common.errors import AglaError


class SampleError(AglaError):
    pass


class PrefixedError(AglaError):
    """Adds a [TEST] prefix once, in the constructor."""

    def __init__(self, error_type, message, options=None):
        final_message = message if message.startswith("[TEST]") else f"[TEST] {message}"
        super().__init__(error_type, final_message, options)


class CodeFormattedError(AglaError):
    """Formats the message on read."""

    @property
    def message(self) -> str:
        base = super().message
        return f"[{self.code}] {base}" if self.code else base


class QuotaError(AglaError):
    """Allows a fixed number of instances per class; further construction fails."""

    remaining = 1

    def __init__(self, error_type, message, options=None):
        if type(self).remaining <= 0:
            raise RuntimeError("QuotaError quota exhausted")
        type(self).remaining -= 1
        super().__init__(error_type, message, options)
