import pytest

from catalog_ingest.common.errors import DecodeError
from catalog_ingest.common.models import RawSourceRecord, Specialist


def test_from_properties_maps_geoportal_keys():
    record = RawSourceRecord.from_properties(
        {
            "id": 12,
            "identifikator": "P12",
            "druh_zariadenia": "ortoped",
            "nazov_zariadenia": "Dr. John Doe",
            "poloha_lat": 48.43,
            "poloha_lon": -71.06,
            "addressline": "",
            "streetname": "Main",
            "buildingnumber": "9",
            "postalcode": "07101",
            "municipality": "Town",
            "telefon": "055/123",
            "mobil": "0905 111",
            "odborni_zastupcovia": "A ako lekár",
            "pondelok": "7:00 - 12:00",
            "nedela": "",
            "nepritomnost_od": "2024-01-01",
            "vszp": "áno",
            "bbox": [17, 48.1, 17.2, 48.2],
        }
    )

    assert record.id == 12
    assert record.identifier == "P12"
    assert record.specialization == "ortoped"
    assert record.name == "Dr. John Doe"
    assert record.latitude == 48.43
    assert record.longitude == -71.06
    assert record.street_name == "Main"
    assert record.phone == "055/123"
    assert record.cellphone == "0905 111"
    assert record.staff == "A ako lekár"
    assert record.monday_hours == "7:00 - 12:00"
    assert record.absence_from == "2024-01-01"
    assert record.vszp == "áno"
    assert record.bbox == (17.0, 48.1, 17.2, 48.2)


def test_from_properties_defaults_missing_and_null_fields():
    record = RawSourceRecord.from_properties({"id": 1, "druh_zariadenia": "ortoped", "email": None})

    assert record.name == ""
    assert record.email == ""
    assert record.latitude == 0.0
    assert record.bbox == ()


def test_from_properties_accepts_integer_coordinates():
    record = RawSourceRecord.from_properties({"poloha_lat": 48, "poloha_lon": 17})
    assert isinstance(record.latitude, float)
    assert record.longitude == 17.0


@pytest.mark.parametrize(
    "properties",
    [
        {"id": "1"},
        {"id": 1.5},
        {"poloha_lat": "48.1"},
        {"poloha_lon": True},
        {"nazov_zariadenia": 5},
        {"bbox": "17,48"},
        {"bbox": ["x"]},
    ],
)
def test_from_properties_rejects_wrong_types(properties):
    with pytest.raises(DecodeError):
        RawSourceRecord.from_properties(properties)


def test_specialist_opening_hours_in_weekday_order():
    specialist = Specialist(name="X", specialty_id=1, location_wkt="POINT(1 2)", monday="8-12", friday="8-10")
    assert specialist.opening_hours() == {
        "monday": "8-12",
        "tuesday": "",
        "wednesday": "",
        "thursday": "",
        "friday": "8-10",
        "saturday": "",
        "sunday": "",
    }
