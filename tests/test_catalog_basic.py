import json
import pytest

from upgrade_guide.catalog import JsonStepRepository, get_repository, normalize_framework, parse_steps


def test_normalize_framework():
    assert normalize_framework("Next.JS") == "nextjs"
    assert normalize_framework("next js") == "nextjs"
    assert normalize_framework("NEXT-JS") == "nextjs"
    assert normalize_framework("Angular") == "angular"
    assert normalize_framework(None) == ""


def test_bundled_catalogs_load():
    repo = JsonStepRepository()
    nextjs = repo.load_steps("Next.JS")
    angular = repo.load_steps("angular")
    assert nextjs and angular
    assert all(s.instruction for s in nextjs + angular)
    assert all(s.from_version <= s.to_version for s in nextjs + angular)


def test_unsupported_framework_is_empty():
    assert JsonStepRepository().load_steps("Vue") == []
    assert JsonStepRepository().load_steps("") == []


def test_malformed_records_are_skipped(tmp_path):
    records = [
        {"instruction": "Keep me", "detailedDescription": "ok", "from": 1, "to": 2, "extra": "ignored"},
        {"detailedDescription": "no instruction", "from": 1, "to": 2},
        {"instruction": "Bad version", "detailedDescription": "x", "from": "abc", "to": 2},
        {"instruction": "", "from": 1, "to": 2},
        "not a record",
        {"instruction": "Typed", "detailedDescription": "", "from": "1.5", "to": 2, "stepType": "testing", "affectedFile": "jest.config.js"},
    ]
    (tmp_path / "nextjs-upgrade-steps.json").write_text(json.dumps(records), encoding="utf-8")
    steps = JsonStepRepository(str(tmp_path)).load_steps("Next.JS")
    assert [s.instruction for s in steps] == ["Keep me", "Typed"]
    assert steps[1].from_version == 1.5
    assert steps[1].to_dict() == {
        "instruction": "Typed",
        "detailedDescription": "",
        "from": 1.5,
        "to": 2.0,
        "stepType": "testing",
        "affectedFile": "jest.config.js",
    }
    assert "extra" not in steps[0].to_dict()


def test_load_failures_degrade_to_empty(tmp_path):
    repo = JsonStepRepository(str(tmp_path))
    # missing file
    assert repo.load_steps("Angular") == []
    # invalid JSON
    (tmp_path / "angular-upgrade-steps.json").write_text("{not json", encoding="utf-8")
    assert repo.load_steps("Angular") == []
    # wrong top-level shape
    (tmp_path / "angular-upgrade-steps.json").write_text(json.dumps({"steps": []}), encoding="utf-8")
    assert repo.load_steps("Angular") == []
    # nesting deeper than the decoder can recurse
    (tmp_path / "angular-upgrade-steps.json").write_text("[" * 200000 + "]" * 200000, encoding="utf-8")
    assert repo.load_steps("Angular") == []


def test_parse_steps_requires_list():
    with pytest.raises(ValueError, match="JSON array"):
        parse_steps({"instruction": "x"})


def test_get_repository_honours_catalog_dir(tmp_path):
    repo = get_repository({"catalog": {"dir": str(tmp_path)}})
    assert isinstance(repo, JsonStepRepository)
    assert repo.data_dir == str(tmp_path)
    assert get_repository().data_dir.endswith("data")


def test_deeply_nested_catalog_yields_no_path(tmp_path):
    from upgrade_guide.orchestrator import compute_upgrade_steps, has_upgrade_path

    (tmp_path / "nextjs-upgrade-steps.json").write_text("[" * 200000 + "]" * 200000, encoding="utf-8")
    repo = JsonStepRepository(str(tmp_path))
    assert compute_upgrade_steps("Next.JS", 1, 4, repository=repo) == []
    assert has_upgrade_path("Next.JS", 1, 4, repository=repo) is False
