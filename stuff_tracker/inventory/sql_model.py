# (c) Nelen & Schuurmans

from sqlalchemy import Column
from sqlalchemy import DateTime
from sqlalchemy import ForeignKey
from sqlalchemy import Index
from sqlalchemy import Integer
from sqlalchemy import MetaData
from sqlalchemy import Table
from sqlalchemy import Text

__all__ = ["metadata", "location_table", "room_table", "item_table"]


metadata = MetaData()


location_table = Table(
    "location",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", Text, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)


room_table = Table(
    "room",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", Text, nullable=False),
    Column(
        "location_id",
        Integer,
        ForeignKey("location.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)


item_table = Table(
    "item",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", Text, nullable=False),
    Column("quantity", Integer, nullable=False),
    Column(
        "room_id",
        Integer,
        ForeignKey("room.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)


# composite indexes ending in id serve the keyset seeks
Index("ix_location_name_id", location_table.c.name, location_table.c.id)
Index("ix_location_created_at_id", location_table.c.created_at, location_table.c.id)
Index("ix_room_location_id_id", room_table.c.location_id, room_table.c.id)
Index("ix_room_name_id", room_table.c.name, room_table.c.id)
Index("ix_item_name_id", item_table.c.name, item_table.c.id)
Index("ix_item_quantity_id", item_table.c.quantity, item_table.c.id)
Index("ix_item_room_id_id", item_table.c.room_id, item_table.c.id)
Index("ix_item_created_at_id", item_table.c.created_at, item_table.c.id)
