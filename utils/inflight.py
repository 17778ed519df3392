from contextlib import contextmanager

from core.errors import OperationInFlight


class InFlightFlag:
    """Boolean busy flag for one operation. A second caller is rejected, not queued."""

    def __init__(self, operation: str):
        self.operation = operation
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    @contextmanager
    def hold(self):
        if self._busy:
            raise OperationInFlight(self.operation)
        self._busy = True
        try:
            yield self
        finally:
            self._busy = False
