# filename: huffman_errors.py


class HuffmanError(Exception):
    """Base class for every failure raised by the codec."""


class EmptyInputError(HuffmanError, ValueError):
    """Raised when asked to compress zero bytes."""


class FormatError(HuffmanError, ValueError):
    """Raised when a container, code table or payload cannot be decoded."""


class InternalConsistencyError(HuffmanError):
    """Raised when the code table does not cover the data being packed."""


class HuffmanIOError(HuffmanError):
    """Raised when an input or output file cannot be read or written.

    ``phase`` is ``"compress"`` or ``"decompress"``, ``role`` is ``"input"``
    or ``"output"``.
    """

    def __init__(self, phase, role, path, reason):
        self.phase = phase
        self.role = role
        self.path = str(path)
        self.reason = reason
        super().__init__(f"{phase}: cannot access {role} file {self.path}: {reason}")
