"""
Base ViewModel for the GraphLens control surface.

ViewModels own engine state and expose it to a host renderer through
read-only properties, command methods and PyQt6 signals. They never hold
renderer objects.
"""

from typing import Any, Optional
from PyQt6.QtCore import QObject, pyqtBoundSignal


class BaseViewModel(QObject):
    """
    Base class for all ViewModels.

    Signals fire after the state they describe has been updated, so slots
    can read the new values from properties.
    """

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)

    def _set_if_changed(
        self,
        attr: str,
        value: Any,
        signal: Optional[pyqtBoundSignal] = None,
        *args: Any,
    ) -> bool:
        """
        Assign `self.<attr>` and emit `signal` only when the value differs.

        Args:
            attr: Private attribute name
            value: New value
            signal: Bound signal to emit after assignment
            *args: Signal arguments

        Returns:
            True if the value changed
        """
        if getattr(self, attr) == value:
            return False
        setattr(self, attr, value)
        if signal is not None:
            signal.emit(*args)
        return True
