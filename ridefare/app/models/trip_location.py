"""
Trip Location database model.

Stores the GPS breadcrumb trail of a ride.
"""

from sqlalchemy import Column, Integer, Float, ForeignKey, DateTime
from sqlalchemy.sql import func
from ridefare.app.db.session import Base


class TripLocation(Base):
    """
    Trip Location model.

    One GPS sample. Rows are never updated; the trail is read back in
    `recorded_at` order to derive the travelled distance.
    """
    __tablename__ = "trip_location_history"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # References
    ride_id = Column(Integer, ForeignKey('rides.id'), nullable=False, index=True)
    driver_id = Column(Integer, nullable=True)

    # GPS fix
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    accuracy = Column(Float, nullable=True)  # meters
    speed = Column(Float, nullable=True)  # m/s
    heading = Column(Float, nullable=True)  # degrees
    altitude = Column(Float, nullable=True)  # meters

    # Timing
    recorded_at = Column(DateTime(timezone=True), nullable=False, index=True)  # When GPS was recorded
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)  # When inserted to DB

    def __repr__(self):
        return f"<TripLocation(ride_id={self.ride_id}, lat={self.latitude}, lng={self.longitude})>"
