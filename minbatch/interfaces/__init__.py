"""Abstract interfaces for batching adapters."""

from minbatch.interfaces.batch_stream_interface import IBatchStream

__all__ = ["IBatchStream"]
