"""
Protocol definition for digest delivery backends.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class Notifier(Protocol):
    """
    Interface a delivery backend must implement.

    The @runtime_checkable decorator allows using isinstance() checks
    against this protocol for structural typing validation.
    """

    async def send_message(self, message: str) -> int:
        """
        Deliver a formatted message.

        Parameters
        ----------
        message : str
            Message text; the backend splits it as needed.

        Returns
        -------
        int
            Number of messages actually sent.
        """
        ...

    async def close(self) -> None:
        """Release any resources held by the backend."""
        ...
