from upgrade_guide.models import UpgradeStep, step_type_priority
from upgrade_guide.stages.ordering import sort_steps


def _step(instruction, frm, to, step_type=None):
    return UpgradeStep(instruction=instruction, from_version=frm, to_version=to, step_type=step_type)


def test_priority_table():
    assert step_type_priority("package-update") == 1
    assert step_type_priority("deployment") == 6
    assert step_type_priority("something-new") == 10
    assert step_type_priority(None) == 10
    assert step_type_priority("") == 10


def test_sort_by_type_then_versions():
    steps = [
        _step("notes", 1, 2),
        _step("deploy", 1, 2, "deployment"),
        _step("config late", 2, 3, "configuration"),
        _step("config wide", 1, 4, "configuration"),
        _step("config narrow", 1, 2, "configuration"),
        _step("bump", 3, 4, "package-update"),
        _step("custom", 0, 1, "custom"),
    ]
    out = sort_steps(steps)
    assert [s.instruction for s in out] == [
        "bump",
        "config narrow",
        "config wide",
        "config late",
        "deploy",
        "custom",
        "notes",
    ]


def test_sort_is_stable_and_deterministic():
    steps = [_step(f"test {i}", 1, 2, "testing") for i in range(5)] + [_step("untyped", 1, 2)]
    first = sort_steps(steps)
    second = sort_steps(list(steps))
    assert first == second
    assert [s.instruction for s in first[:5]] == [f"test {i}" for i in range(5)]
