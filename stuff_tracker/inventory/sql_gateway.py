# (c) Nelen & Schuurmans

from stuff_tracker.sql import SQLGateway

from .sql_model import item_table
from .sql_model import location_table
from .sql_model import room_table

__all__ = ["ItemSQLGateway", "LocationSQLGateway", "RoomSQLGateway"]


class LocationSQLGateway(SQLGateway, table=location_table):
    pass


class RoomSQLGateway(SQLGateway, table=room_table):
    pass


class ItemSQLGateway(SQLGateway, table=item_table):
    pass
