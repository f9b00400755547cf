from handoff.document.sections import (
    PREAMBLE_HEADER,
    Section,
    is_header_line,
    join_sections,
    patient_sections,
    split_sections,
)


def _sample_document() -> str:
    return "\n".join(
        [
            "Handoff 10/12",
            "",
            "### 1. John Doe - 101",
            "#Sepsis: on abx",
            "- continue ceftriaxone",
            "",
            "### 2. Jane Roe - 102",
            "#CHF",
            "",
        ]
    )


def test_split_empty_input_returns_no_sections() -> None:
    assert split_sections("") == []


def test_split_collects_preamble_under_sentinel_header() -> None:
    sections = split_sections(_sample_document())
    assert [item.header for item in sections] == [
        PREAMBLE_HEADER,
        "### 1. John Doe - 101",
        "### 2. Jane Roe - 102",
    ]
    assert sections[0].is_preamble is True
    assert sections[0].lines == ["Handoff 10/12", ""]
    assert sections[1].lines == ["#Sepsis: on abx", "- continue ceftriaxone", ""]
    assert sections[2].lines == ["#CHF", ""]


def test_split_without_preamble_starts_with_first_header() -> None:
    sections = split_sections("### A\nx\n### B")
    assert sections == [Section(header="### A", lines=["x"]), Section(header="### B", lines=[])]


def test_split_keeps_deeper_markdown_headings_as_body_lines() -> None:
    sections = split_sections("### A\n#### Labs\n##Problem")
    assert len(sections) == 1
    assert sections[0].lines == ["#### Labs", "##Problem"]
    assert is_header_line("#### Labs") is False
    assert is_header_line("### A") is True


def test_split_never_drops_or_duplicates_lines() -> None:
    document = _sample_document()
    raw_lines = document.split("\n")
    header_count = sum(1 for line in raw_lines if is_header_line(line))
    body_count = sum(len(item.lines) for item in split_sections(document))
    assert body_count == len(raw_lines) - header_count


def test_join_sections_reconstructs_the_document() -> None:
    for document in (_sample_document(), "### A\nx", "only preamble\n", "\n"):
        assert join_sections(split_sections(document)) == document


def test_patient_sections_excludes_preamble() -> None:
    headers = [item.header for item in patient_sections(_sample_document())]
    assert headers == ["### 1. John Doe - 101", "### 2. Jane Roe - 102"]
