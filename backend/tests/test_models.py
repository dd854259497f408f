import pytest
from pydantic import ValidationError

from luxuryhomes.core.exceptions import (
    DiscoveryError, QueryFailure, NotFound, Unauthenticated,
    FavoriteSyncFailure, ListingSubmissionFailure
)
from luxuryhomes.models import (
    Property, PropertyCreate, PLACEHOLDER_IMAGE, split_image_references
)
from luxuryhomes.modules.properties.service import city_from_location


class TestPropertyModels:
    """Test cases for property models"""

    def test_images_split_on_commas(self):
        assert split_image_references("/a.jpg, /b.jpg ,,/c.jpg") == ["/a.jpg", "/b.jpg", "/c.jpg"]

    @pytest.mark.parametrize("image_url", [None, "", " , "])
    def test_placeholder_image(self, image_url):
        assert split_image_references(image_url) == [PLACEHOLDER_IMAGE]

    def test_record_is_flat(self, sample_properties):
        record = sample_properties[0].to_record()
        assert record["location"] == "123 Ocean Dr, Miami"
        assert record["price"] == 1_250_000
        assert isinstance(record["created_at"], str)
        assert Property.model_validate(record) == sample_properties[0]

    def test_images_property(self, sample_properties):
        assert sample_properties[0].images == ["/img/a.jpg", "/img/b.jpg"]
        assert sample_properties[1].images == [PLACEHOLDER_IMAGE]

    def test_create_validation(self):
        with pytest.raises(ValidationError):
            PropertyCreate(title="", description="x", price=1, location="Miami")
        with pytest.raises(ValidationError):
            PropertyCreate(title="Villa", description="x", price=0, location="Miami")
        with pytest.raises(ValidationError):
            PropertyCreate(title="Villa", description="x", price=1, location="Miami", bedrooms=-1)


class TestCityFromLocation:
    """Test cases for deriving the city used by similar listings"""

    @pytest.mark.parametrize("location,city", [
        ("123 Ocean Dr, Miami", "Miami"),
        ("123 Ocean Dr, Miami, FL", "Miami"),
        ("123 Ocean Dr, Miami, FL 33139", "Miami"),
        ("Miami Beach Tower", "Miami Beach Tower"),
        ("", ""),
    ])
    def test_city(self, location, city):
        assert city_from_location(location) == city


class TestErrors:
    """Test cases for the error taxonomy"""

    @pytest.mark.parametrize("error,status", [
        (QueryFailure("x"), 502),
        (NotFound(), 404),
        (Unauthenticated(), 401),
        (FavoriteSyncFailure("x"), 502),
        (ListingSubmissionFailure("x"), 502),
    ])
    def test_status_codes(self, error, status):
        assert isinstance(error, DiscoveryError)
        assert error.status_code == status

    def test_to_dict(self):
        assert NotFound().to_dict() == {"detail": "Property not found"}
        assert QueryFailure("down", {"index": "properties"}).to_dict() == {
            "detail": "down",
            "details": {"index": "properties"},
        }
