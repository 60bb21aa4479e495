from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import LeaveMaster


class LeaveMasterRepository(Protocol):
    def list_active(self) -> Sequence[LeaveMaster]:
        raise NotImplementedError

    def get_by_id(self, leave_master_id: int) -> Optional[LeaveMaster]:
        raise NotImplementedError
