import dataclasses


class ReconciliationError(Exception):
    pass


@dataclasses.dataclass(frozen=True)
class Synced:
    server_revision: int


@dataclasses.dataclass(frozen=True)
class Failed:
    reason: str


@dataclasses.dataclass(frozen=True)
class PushOutcome:
    milestone_id: str
    result: Synced | Failed

    @classmethod
    def build(cls, milestone_id: str, status: str, server_revision: int | None = None, reason: str = ""):
        if status == "synced" and server_revision is not None:
            return cls(milestone_id, Synced(int(server_revision)))
        return cls(milestone_id, Failed(reason or f"server returned status {status!r}"))

    @property
    def is_synced(self) -> bool:
        return isinstance(self.result, Synced)


@dataclasses.dataclass
class PushReport:
    subject_id: str
    pushed: int = 0
    synced: int = 0
    failed: int = 0
    discarded: int = 0

    def asdict(self):
        return dataclasses.asdict(self)
