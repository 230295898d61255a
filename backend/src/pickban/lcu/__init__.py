"""League client (LCU) transport and event ingestion."""

from pickban.lcu.client import LcuClient, LcuRequestError
from pickban.lcu.sync import LcuStateSync

__all__ = [
    "LcuClient",
    "LcuRequestError",
    "LcuStateSync",
]
