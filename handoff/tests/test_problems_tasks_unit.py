from handoff.extract.problems import (
    PlanProblem,
    extract_plans,
    extract_problem_titles,
    extract_problems,
    problem_title,
)
from handoff.extract.tasks import TaskProgress, count_tasks


def test_extract_plans_groups_two_problems_for_one_patient() -> None:
    document = "\n".join(
        [
            "### 1. John Doe - 101",
            "#Sepsis: on abx",
            "- continue ceftriaxone",
            "",
            "#AKI",
            "- trend Cr",
        ]
    )
    plans = extract_plans(document)
    assert len(plans) == 1
    assert plans[0].patient_header == "### 1. John Doe - 101"
    assert plans[0].patient_index == 0
    assert plans[0].problems == [
        PlanProblem(title="Sepsis", details=["- continue ceftriaxone"]),
        PlanProblem(title="AKI", details=["- trend Cr"]),
    ]


def test_extract_plans_skips_sections_without_problems_but_counts_them() -> None:
    document = "#Preamble problem\n### A\nno problems here\n### B\n#CHF\n- diurese"
    plans = extract_plans(document)
    assert [(item.patient_header, item.patient_index) for item in plans] == [("### B", 1)]


def test_extract_problems_ignores_lines_before_first_heading() -> None:
    problems = extract_problems(["intro text", "##  HTN : controlled", "  amlodipine  "])
    assert problems == [PlanProblem(title="HTN", details=["amlodipine"])]


def test_problem_title_strips_hashes_and_detail_after_colon() -> None:
    assert problem_title("### Pneumonia: RLL") == "Pneumonia"
    assert problem_title("#Delirium") == "Delirium"


def test_extract_problem_titles_drops_empty_and_overlong_titles() -> None:
    long_title = "#" + "x" * 60
    assert extract_problem_titles(["#", "#AKI", long_title, "plain"]) == ["AKI"]


def test_count_tasks_reports_percentage() -> None:
    progress = count_tasks(["- [ ] repeat lactate", "- [x] blood cultures", "plain"])
    assert progress == TaskProgress(total=2, completed=1, progress=50.0)


def test_count_tasks_without_tasks_is_zero() -> None:
    assert count_tasks([]) == TaskProgress(total=0, completed=0, progress=0.0)
    assert count_tasks(["no checkboxes"]).progress == 0.0
