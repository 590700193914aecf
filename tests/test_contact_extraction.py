"""Tests for contact block extraction from the top of a resume."""

from resume_extract.core.contact_parser import contact_leftovers, extract_contact_info


def test_name_email_phone_from_pipe_line():
    contact = extract_contact_info(["John Doe", "john@x.com | 555-123-4567"])

    assert contact.name == "John Doe"
    assert contact.email == "john@x.com"
    assert contact.phone == "555-123-4567"
    assert contact.location is None
    assert contact.website is None


def test_international_phone_with_country_code():
    contact = extract_contact_info(["Ana Ruiz", "+1 (555) 123-4567 | ana@ruiz.dev"])
    assert contact.phone == "+1 (555) 123-4567", f"Got phone={contact.phone!r}"


def test_phone_pattern_priority_beats_reading_order():
    """The first PATTERN that matches wins, even if another number appears earlier in the text."""
    contact = extract_contact_info(["Jane Doe", "(555) 123-4567 · 555-987-6543"])
    assert contact.phone == "555-987-6543", f"Got phone={contact.phone!r}"


def test_parenthesized_phone():
    contact = extract_contact_info(["Jane Doe", "jane@x.com | (512) 709-7014"])
    assert contact.phone == "(512) 709-7014"


def test_city_state_location():
    contact = extract_contact_info(["Jane Doe", "Austin, TX | jane@x.com"])
    assert contact.location == "Austin, TX"


def test_city_country_location():
    contact = extract_contact_info(["Jane Doe", "jane@x.com", "Berlin, Germany"])
    assert contact.location == "Berlin, Germany"


def test_location_never_taken_from_name_line():
    contact = extract_contact_info(["Paris, Texas", "paris@x.com"])
    assert contact.name == "Paris, Texas"
    assert contact.location is None


def test_website_and_bare_linkedin():
    contact = extract_contact_info(["Jane Doe", "https://jane.dev | jane@x.com"])
    assert contact.website == "https://jane.dev"

    contact = extract_contact_info(["John Doe", "john@x.com", "linkedin.com/in/johndoe"])
    assert contact.website == "linkedin.com/in/johndoe"


def test_fields_beyond_window_are_ignored():
    """Only the first five non-blank lines are scanned."""
    lines = ["Jane Doe", "", "Line two", "Line three", "", "Line four", "Line five", "late@x.com"]
    contact = extract_contact_info(lines)
    assert contact.email is None


def test_empty_input_gives_empty_contact():
    contact = extract_contact_info(["", "   "])
    assert contact.name is None
    assert contact.email is None


def test_unmatched_header_lines_are_leftovers():
    header = ["Jane Doe", "Full-Stack Engineer", "jane@x.com | 555-123-4567"]
    contact = extract_contact_info(header)
    assert contact_leftovers(header, contact) == ["Full-Stack Engineer"]


def test_partly_used_header_line_keeps_its_rest():
    header = ["Jane Doe", "Senior Engineer · Austin, TX", "jane@x.com"]
    contact = extract_contact_info(header)

    assert contact.location == "Austin, TX"
    assert contact_leftovers(header, contact) == ["Senior Engineer"]


def test_second_profile_link_is_a_leftover():
    header = ["Jane Doe", "jane@x.com | linkedin.com/in/jane | github.com/jane"]
    contact = extract_contact_info(header)

    assert contact.website == "linkedin.com/in/jane"
    assert contact_leftovers(header, contact) == ["github.com/jane"]


def test_field_labels_are_not_leftovers():
    header = ["Jane Doe", "Email: jane@x.com | Phone: 555-123-4567"]
    contact = extract_contact_info(header)
    assert contact_leftovers(header, contact) == []
