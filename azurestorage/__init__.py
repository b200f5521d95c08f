"""azurestorage — service-broker adapter for Azure blob storage."""

import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
