"""Unit tests for contact_mapping: ChurchSuite → Brevo field mapping."""
import pytest

from tools.contact_mapping import join_address, map_contact, resolve_email, to_e164


class TestResolveEmail:
    def test_direct_snake_case_field(self):
        assert resolve_email({"email": "  Jane@Example.COM "}) == "jane@example.com"

    def test_direct_camel_case_field(self):
        assert resolve_email({"emailAddress": "bob@example.com"}) == "bob@example.com"

    def test_direct_field_wins_over_collection(self):
        record = {"email": "direct@example.com", "emails": [{"address": "other@example.com"}]}
        assert resolve_email(record) == "direct@example.com"

    def test_default_entry_of_collection(self):
        record = {
            "email": "",
            "emails": [
                {"address": "first@example.com"},
                {"address": "default@example.com", "is_default": True},
            ],
        }
        assert resolve_email(record) == "default@example.com"

    def test_first_entry_when_none_flagged(self):
        record = {"emails": [{"email": "first@example.com"}, {"email": "second@example.com"}]}
        assert resolve_email(record) == "first@example.com"

    def test_plain_string_entries(self):
        assert resolve_email({"emails": ["list@example.com"]}) == "list@example.com"

    @pytest.mark.parametrize("record", [
        {},
        {"email": None, "emailAddress": "   "},
        {"emails": []},
        {"emails": [{"address": ""}]},
        {"first_name": "Jane"},
    ])
    def test_unresolvable_returns_none(self, record):
        assert resolve_email(record) is None


class TestJoinAddress:
    def test_skips_missing_lines_in_order(self):
        record = {"address": "1 High Street", "address2": "", "address3": "Little Village"}
        assert join_address(record) == "1 High Street, Little Village"

    def test_camel_case_lines(self):
        record = {"addressLine1": "Flat 2", "addressLine2": "10 Low Road", "addressLine4": "Uptown"}
        assert join_address(record) == "Flat 2, 10 Low Road, Uptown"

    def test_nested_address_object(self):
        record = {"address": {"line1": "5 Church Lane", "line3": "Westfield", "city": "Leeds"}}
        assert join_address(record) == "5 Church Lane, Westfield"

    def test_no_lines(self):
        assert join_address({"address": None}) is None


class TestToE164:
    @pytest.mark.parametrize("value, expected", [
        ("+44 7700 900123", "+447700900123"),
        ("+44 7700 900123 x", None),
        ("0044 7700.900.123", "+447700900123"),
        ("+1 (555) 010-9999", "+15550109999"),
        ("07700 900123", None),
        ("+0 123456789", None),
        ("ext. 12", None),
        ("", None),
        (None, None),
    ])
    def test_normalizes_or_rejects(self, value, expected):
        assert to_e164(value) == expected


class TestMapContact:
    def test_drops_contact_without_email(self):
        assert map_contact({"first_name": "No", "last_name": "Email"}) is None

    def test_maps_snake_case_record(self):
        mapped = map_contact({
            "id": 42,
            "first_name": "Jane",
            "last_name": "Doe",
            "email": "jane@example.com",
            "mobile": "07700 900123",
            "address": "1 High Street",
            "address3": "Little Village",
            "postcode": "AB1 2CD",
        })

        assert mapped.email == "jane@example.com"
        assert mapped.attributes == {
            "FIRSTNAME": "Jane",
            "LASTNAME": "Doe",
            "TELEPHONE": "07700 900123",
            "POSTCODE": "AB1 2CD",
            "CHURCHSUITE_ID": 42,
            "ADDRESS": "1 High Street, Little Village",
        }

    def test_maps_camel_case_record(self):
        mapped = map_contact({
            "firstName": "Bob",
            "lastName": "Smith",
            "emails": [{"address": "bob@example.com", "isDefault": True}],
            "mobileNumber": "+44 7700 900456",
            "dateOfBirth": "1980-02-01",
        })

        assert mapped.email == "bob@example.com"
        assert mapped.attributes["FIRSTNAME"] == "Bob"
        assert mapped.attributes["LASTNAME"] == "Smith"
        assert mapped.attributes["SMS"] == "+447700900456"
        assert mapped.attributes["DATE_OF_BIRTH"] == "1980-02-01"

    def test_never_emits_blank_attributes(self):
        mapped = map_contact({
            "email": "blank@example.com",
            "first_name": "",
            "last_name": None,
            "mobile": "   ",
            "city": "York",
        })

        assert mapped.attributes == {"CITY": "York"}
        for value in mapped.attributes.values():
            assert value not in ("", None)

    def test_snake_case_preferred_over_camel_case(self):
        mapped = map_contact({"email": "a@example.com", "first_name": "Snake", "firstName": "Camel"})
        assert mapped.attributes["FIRSTNAME"] == "Snake"

    def test_falls_back_to_camel_case_when_snake_empty(self):
        mapped = map_contact({"email": "a@example.com", "first_name": " ", "firstName": "Camel"})
        assert mapped.attributes["FIRSTNAME"] == "Camel"

    def test_reads_city_from_nested_address(self):
        mapped = map_contact({"email": "a@example.com", "address": {"line1": "2 Road", "city": "Leeds"}})
        assert mapped.attributes["CITY"] == "Leeds"
        assert mapped.attributes["ADDRESS"] == "2 Road"

    def test_local_mobile_goes_to_telephone_not_sms(self):
        mapped = map_contact({"email": "a@example.com", "mobile": "07700 900123"})

        assert "SMS" not in mapped.attributes
        assert mapped.attributes["TELEPHONE"] == "07700 900123"

    def test_local_mobile_does_not_replace_telephone(self):
        mapped = map_contact({
            "email": "a@example.com",
            "mobile": "07700 900123",
            "telephone": "0113 496 0000",
        })

        assert "SMS" not in mapped.attributes
        assert mapped.attributes["TELEPHONE"] == "0113 496 0000"

    def test_e164_mobile_goes_to_sms(self):
        mapped = map_contact({"email": "a@example.com", "mobile": "+44 7700 900123"})

        assert mapped.attributes["SMS"] == "+447700900123"
        assert "TELEPHONE" not in mapped.attributes
