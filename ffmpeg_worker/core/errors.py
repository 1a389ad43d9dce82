from typing import Optional


class WorkerError(Exception):
    """Base for every failure surfaced to the caller as a 400."""


class InvalidInput(WorkerError):
    pass


class UpstreamTransferFailure(WorkerError):
    pass


class TranscodeFailure(WorkerError):
    def __init__(self, message: str, returncode: Optional[int] = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr
