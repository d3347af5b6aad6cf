from dataclasses import dataclass, field
from typing import Optional, List
from shoescan.orchestrator.contracts import ScanResult
from shoescan.orchestrator.history import SessionHistory

@dataclass
class StatusStore:
    busy: bool = False
    current: Optional[ScanResult] = None    # result card on screen; /reset clears it
    last_error: Optional[str] = None
    camera_error: Optional[str] = None      # persistent banner until a capture succeeds
    history: SessionHistory = field(default_factory=SessionHistory)
    logs: List[str] = field(default_factory=list)

    def set_busy(self, v: bool):
        self.busy = v

    def log(self, msg: str):
        self.logs.append(msg)
        if len(self.logs) > 200:
            self.logs = self.logs[-200:]
