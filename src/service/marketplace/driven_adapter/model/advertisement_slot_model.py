from sqlalchemy import CheckConstraint, Integer
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base


# Single row (id = 1): how many advertisement slots are currently claimed
ADVERTISEMENT_SLOT_ROW_ID = 1


class AdvertisementSlotModel(Base):
    __tablename__ = 'advertisement_slot'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    used: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (CheckConstraint('used >= 0', name='ck_advertisement_slot_used'),)
