from handoff.document.header import HeaderInfo, parse_header, synthesize_header


def test_parse_header_splits_name_and_room_on_hyphen() -> None:
    assert parse_header("### 1. John Doe - Room 101") == HeaderInfo(name="John Doe", room="Room 101")


def test_parse_header_accepts_en_and_em_dash() -> None:
    assert parse_header("### 1. John Doe – 101") == HeaderInfo(name="John Doe", room="101")
    assert parse_header("### John Doe — ICU 4") == HeaderInfo(name="John Doe", room="ICU 4")


def test_parse_header_without_room() -> None:
    assert parse_header("### 1. John Doe") == HeaderInfo(name="John Doe", room="")


def test_parse_header_reads_demographics_parenthetical() -> None:
    info = parse_header("### 2. Jane Smith - 4B (72f)")
    assert info == HeaderInfo(name="Jane Smith", room="4B", age="72", gender="F")


def test_parse_header_reads_demographics_on_name_side() -> None:
    info = parse_header("### Bob Lee (45M)")
    assert info == HeaderInfo(name="Bob Lee", room="", age="45", gender="M")


def test_parse_header_keeps_hyphenated_names_together() -> None:
    assert parse_header("### 3. Mary-Ann Jones - 12").name == "Mary-Ann Jones"


def test_synthesize_header_uses_positional_name_and_combined_age_gender() -> None:
    lines = ["John Smith - 402", "68 yo male admitted with sepsis"]
    assert synthesize_header(lines) == "### John Smith — 402 (68M)"
    assert synthesize_header(lines, 0) == "### 1. John Smith — 402 (68M)"


def test_synthesize_header_reads_labeled_fields_and_skips_section_labels() -> None:
    lines = ["Handoff", "", "Name: Alice Wong", "Room: 12B", "Age: 54", "Sex: Female"]
    assert synthesize_header(lines) == "### Alice Wong — 12B (54F)"


def test_synthesize_header_falls_back_to_new_patient() -> None:
    assert synthesize_header([]) == "### New Patient"
    assert synthesize_header(["", "   "], 2) == "### 3. New Patient"


def test_synthesize_header_truncates_long_names() -> None:
    header = synthesize_header(["Christopher Montgomery"])
    assert header == "### Christopher Montg…"


def test_synthesize_header_first_found_name_wins() -> None:
    lines = ["Jane Doe", "Name: Someone Else"]
    assert synthesize_header(lines) == "### Jane Doe"


def test_synthesize_header_content_line_after_label_word_is_scanned() -> None:
    lines = ["Alice Wong", "Assessment: 65yo F with CHF exacerbation"]
    assert synthesize_header(lines) == "### Alice Wong (65F)"


def test_synthesize_header_only_scans_first_fifteen_lines() -> None:
    lines = [""] * 15 + ["Name: Late Entry"]
    assert synthesize_header(lines) == "### New Patient"
