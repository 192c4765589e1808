import enum

from sqlalchemy import event

from utils import line_amount


class RecordStatus(enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


def track_total_amount(model):
    """Keep ``total_amount`` equal to quantity x rate on every insert and update."""

    @event.listens_for(model, "before_insert")
    @event.listens_for(model, "before_update")
    def _recompute_total_amount(mapper, connection, target):
        target.total_amount = line_amount(target.quantity, target.rate)

    return model


class TransactionRecordMixin:
    """Read helpers shared by collections and deliveries."""

    @property
    def vehicle_number(self):
        return self.vehicle.vehicle_number if self.vehicle is not None else None

    @property
    def driver_name(self):
        return self.driver.name if self.driver is not None else None

    @property
    def is_editable(self) -> bool:
        return self.status == RecordStatus.PENDING
