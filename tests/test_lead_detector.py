from chatwidget.services.lead_detector import detect_email, detect_phone, detect_name, detect_lead


def test_full_introduction():
    lead = detect_lead("My name is Jane Doe, call me at (415) 555-0101, jane@example.com")
    assert lead.name == "Jane Doe"
    assert lead.phone == "(415) 555-0101"
    assert lead.email == "jane@example.com"
    assert lead.has_contact


def test_email_first_match():
    assert detect_email("a@b.io or c@d.org") == "a@b.io"
    assert detect_email("no address here") is None


def test_phone_formats():
    assert detect_phone("ring 415-555-0101 today") == "415-555-0101"
    assert detect_phone("+1 415.555.0101") == "+1 415.555.0101"
    assert detect_phone("4155550101") == "4155550101"
    assert detect_phone("order 12345") is None


def test_phone_area_code_cannot_start_with_0_or_1():
    assert detect_phone("015-555-0101") is None


def test_name_phrases():
    assert detect_name("Hi, I'm Carlos") == "Carlos"
    assert detect_name("i am Maria Lopez") == "Maria Lopez"
    assert detect_name("please CALL ME Sam") == "Sam"


def test_name_must_be_capitalized():
    assert detect_name("i'm looking for pricing") is None
    assert detect_name("i am not sure") is None


def test_nothing_detected():
    lead = detect_lead("What are your opening hours?")
    assert lead.is_empty
    assert not lead.has_contact


def test_name_alone_is_not_contact():
    lead = detect_lead("My name is Ann")
    assert lead.name == "Ann"
    assert not lead.has_contact
