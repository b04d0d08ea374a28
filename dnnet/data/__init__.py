"""Dataset containers and the partitioned collection backend."""

from .collection import LocalCollection, ParallelCollection
from .labelled import LabelledData, UnlabelledData

__all__ = ["LabelledData", "LocalCollection", "ParallelCollection", "UnlabelledData"]
