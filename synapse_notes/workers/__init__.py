from .store_call import QtTaskRunner, StoreCallWorker

__all__ = [
    "QtTaskRunner",
    "StoreCallWorker",
]
