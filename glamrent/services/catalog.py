from dataclasses import dataclass
from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from glamrent.exceptions import StorageError
from glamrent.models.listing_model import Listing
from glamrent.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ListingSnapshot:
    id: str
    owner_id: str
    name: str
    price: float
    location: str
    image: str
    makeup_price: Optional[float]


class ListingCatalog:
    """Read-only view of the product catalog used by the booking core"""

    def __init__(self, db: Session):
        self.db = db

    def get_listing(self, listing_id: str) -> Optional[ListingSnapshot]:
        try:
            listing = (
                self.db.query(Listing)
                .filter(Listing.id == str(listing_id), Listing.is_active == True)
                .first()
            )
        except SQLAlchemyError as e:
            logger.error(f"Error looking up listing {listing_id}: {str(e)}")
            raise StorageError()

        if not listing:
            return None

        return ListingSnapshot(
            id=listing.id,
            owner_id=listing.owner_id,
            name=listing.name,
            price=float(listing.price),
            location=listing.location or "",
            image=listing.image or "",
            makeup_price=float(listing.makeup_price) if listing.makeup_price is not None else None,
        )
