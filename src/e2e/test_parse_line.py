from namedir.parser import derive_contact, is_data_line, parse_line


def test_first_last_split_on_space():
    e = parse_line("Ahmed Naciri", 1)
    assert e is not None
    assert (e.id, e.display_name, e.first_part, e.last_part) == (1, "Ahmed Naciri", "Ahmed", "Naciri")
    assert e.contact == "ahmed.naciri@example.com"


def test_comma_form_rejoins_remainder():
    e = parse_line("Smith, John, Jr", 7)
    assert e.first_part == "Smith"
    assert e.last_part == "John, Jr"
    assert e.display_name == "Smith John, Jr"
    assert e.contact == "smith.john.jr@example.com"


def test_extra_whitespace_keeps_original_display_name():
    e = parse_line("  Jean   Paul  Sartre \n", 3)
    assert e.first_part == "Jean"
    assert e.last_part == "Paul Sartre"
    assert e.display_name == "Jean   Paul  Sartre"
    assert e.contact == "jean.paul.sartre@example.com"


def test_single_token_is_first_part_only():
    e = parse_line("Cher", 2)
    assert (e.display_name, e.first_part, e.last_part) == ("Cher", "Cher", "")


def test_blank_and_comment_lines_are_skipped():
    assert parse_line("", 1) is None
    assert parse_line("   \t", 1) is None
    assert parse_line("# generated file", 1) is None
    assert not is_data_line("#x")
    assert is_data_line("x#")


def test_contact_strips_non_ascii_and_punctuation():
    assert derive_contact("Zoë O'Neil") == "zo.oneil@example.com"


def test_parse_is_deterministic():
    a = parse_line("Brahim Idrissi", 3)
    b = parse_line("Brahim Idrissi", 3)
    assert a == b
    assert derive_contact(a.display_name) == a.contact
