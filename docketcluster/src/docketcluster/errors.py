from __future__ import annotations

from typing import Iterable


class DocketClusterError(RuntimeError):
    pass


class InputSchemaError(DocketClusterError, ValueError):
    def __init__(self, missing: Iterable[str], *, source: str = 'input') -> None:
        self.missing = sorted(missing)
        super().__init__(f'{source} is missing required columns: {self.missing}')


class DegenerateInputError(DocketClusterError):
    pass


__all__ = ['DocketClusterError', 'InputSchemaError', 'DegenerateInputError']
